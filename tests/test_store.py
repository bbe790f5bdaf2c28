"""Tests for the process-wide grid holder."""
import pytest

from ekmagrid.model.grid import EmptyGridError, RowColumns, build_grid
from ekmagrid.model.results import FailureReason
from ekmagrid.model.store import GridStore, is_snapshot_path

from conftest import make_row


class TestGridStore:

    def test_empty_store_is_not_ready(self):
        store = GridStore()
        assert not store.is_ready()
        assert store.map_forward(0.5, 0.5).reason == FailureReason.NOT_READY
        assert store.map_inverse(0.5, 0.5).reason == FailureReason.NOT_READY
        assert store.map_inverse_corner_fallback(0.5, 0.5).reason == FailureReason.NOT_READY

    def test_rebuild_installs_new_grid(self, unit_square_rows):
        store = GridStore()
        grid = store.rebuild(unit_square_rows, source="unit")
        assert store.grid is grid
        assert store.source == "unit"
        assert store.map_forward(0.5, 0.5).x == pytest.approx(0.5)
        assert store.map_inverse(0.5, 0.5).a == pytest.approx(0.5)

    def test_failed_rebuild_keeps_previous_grid(self, unit_square_grid):
        store = GridStore(unit_square_grid)
        with pytest.raises(EmptyGridError):
            store.rebuild([make_row(None, None, None, None)])
        assert store.grid is unit_square_grid
        assert store.is_ready()

    def test_old_snapshot_unchanged_by_rebuild(self, unit_square_rows, ekma_rows):
        store = GridStore()
        old = store.rebuild(unit_square_rows)
        store.rebuild(ekma_rows)
        assert len(old) == 4
        assert store.grid is not old

    def test_load_csv_cached_by_source(self, monkeypatch, unit_square_rows):
        calls = []

        def fake_read_rows(filepath):
            calls.append(filepath)
            return unit_square_rows

        monkeypatch.setattr("ekmagrid.model.store.read_rows", fake_read_rows)
        store = GridStore()
        first = store.load_csv("grid.csv")
        assert store.load_csv("grid.csv") is first
        assert calls == ["grid.csv"]

        store.load_csv("grid.csv", force=True)
        store.load_csv("other.csv")
        assert calls == ["grid.csv", "grid.csv", "other.csv"]
        assert store.source == "other.csv"

    def test_load_csv_missing_file(self, tmp_path, unit_square_grid):
        store = GridStore(unit_square_grid)
        with pytest.raises(OSError):
            store.load_csv(str(tmp_path / "missing.csv"))
        assert store.grid is unit_square_grid

    def test_clear(self, unit_square_grid):
        store = GridStore(unit_square_grid)
        store.clear()
        assert store.grid is None
        assert store.map_forward(0.0, 0.0).reason == FailureReason.NOT_READY


class TestSnapshots:
    """HDF5 snapshots as a grid source."""

    def test_save_and_reload(self, tmp_path, ekma_grid):
        path = str(tmp_path / "grid.h5")
        GridStore(ekma_grid).save_snapshot(path)
        store = GridStore()
        grid = store.load_snapshot(path)
        assert grid.samples == ekma_grid.samples
        assert store.source == path
        assert store.columns == RowColumns()

    def test_load_dispatches_on_suffix(self, tmp_path, unit_square_rows, monkeypatch):
        path = str(tmp_path / "grid.HDF5")
        GridStore(build_grid(unit_square_rows)).save_snapshot(path)
        monkeypatch.setattr("ekmagrid.model.store.read_rows", lambda filepath: pytest.fail("CSV reader used"))
        assert len(GridStore().load(path)) == 4
        assert is_snapshot_path("a/b.h5")
        assert not is_snapshot_path("a/b.csv")

    def test_snapshot_keeps_custom_columns(self, tmp_path):
        columns = RowColumns(a="v", b="n", x="o", y="p")
        store = GridStore()
        store.rebuild([{"v": 0.0, "n": 0.0, "o": 1.0, "p": 2.0}], columns)
        path = str(tmp_path / "grid.h5")
        store.save_snapshot(path)
        other = GridStore()
        other.load(path)
        assert other.columns == columns

    def test_save_without_grid(self, tmp_path):
        with pytest.raises(ValueError):
            GridStore().save_snapshot(str(tmp_path / "grid.h5"))

    def test_bad_snapshot_keeps_previous_grid(self, tmp_path, unit_square_grid):
        path = tmp_path / "grid.h5"
        path.write_text("not hdf5")
        store = GridStore(unit_square_grid)
        with pytest.raises(ValueError):
            store.load(str(path))
        assert store.grid is unit_square_grid
