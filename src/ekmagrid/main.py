"""
Command-line interface.

Loads a grid table and runs one mapping query, printing the result as JSON.
Exit status: 0 on success, 1 when the mapping fails, 2 when the grid cannot
be loaded or a snapshot cannot be written.
"""
import argparse
import json
import logging
import sys
from typing import Optional, Sequence

from ekmagrid.analysis.isopleths import extract_isopleths
from ekmagrid.analysis.scenario import project_scenario
from ekmagrid.config import DEFAULT_GRID_PATH, DEFAULT_LEVELS
from ekmagrid.logging_config import setup_logging
from ekmagrid.model.store import GridStore

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        prog="ekmagrid",
        description="Map between emissions (A, B) and response (X, Y) coordinates of an EKMA grid.",
        formatter_class=argparse.RawTextHelpFormatter,
        epilog=(
            "Examples\n"
            "  ekmagrid --data grid.csv forward 2.5 10\n"
            "  ekmagrid --data grid.csv inverse 30.2 41.7 --levels 10\n"
            "  ekmagrid --data grid.csv scenario 30.2 41.7 --factor-a 0.8 --factor-b 0.5\n"
            "  ekmagrid --data grid.csv snapshot grid.h5\n"
            "  ekmagrid --data grid.h5 inverse 30.2 41.7\n"
        ),
    )
    ap.add_argument('-d', '--data', default=DEFAULT_GRID_PATH, help='Path to the grid CSV table or HDF5 snapshot (.h5).')
    ap.add_argument('--log-level', default='WARNING',
                    choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'], help='Logging verbosity.')
    ap.add_argument('--log-file', default=None, help='Also write the log to this file.')

    sub = ap.add_subparsers(dest='command', required=True)

    fwd = sub.add_parser('forward', help='Emissions (A, B) -> response (X, Y).')
    fwd.add_argument('a', type=float)
    fwd.add_argument('b', type=float)

    inv = sub.add_parser('inverse', help='Response (X, Y) -> emissions (A, B).')
    inv.add_argument('x', type=float)
    inv.add_argument('y', type=float)
    inv.add_argument('--levels', type=int, default=DEFAULT_LEVELS, help='Subdivision levels.')
    inv.add_argument('--corner', action='store_true', help='Return the nearest refined corner instead.')

    scn = sub.add_parser('scenario', help='Scale the emissions behind (X, Y) and predict the new response.')
    scn.add_argument('x', type=float)
    scn.add_argument('y', type=float)
    scn.add_argument('--factor-a', type=float, default=1.0)
    scn.add_argument('--factor-b', type=float, default=1.0)
    scn.add_argument('--levels', type=int, default=DEFAULT_LEVELS)
    scn.add_argument('--corner', action='store_true')

    sub.add_parser('isopleths', help='List the isopleths of the grid.')

    snap = sub.add_parser('snapshot', help='Save the loaded grid as an HDF5 snapshot.')
    snap.add_argument('output', help='Path of the .h5 file to write.')

    args = ap.parse_args(argv)
    if getattr(args, 'levels', 0) < 0:
        ap.error("--levels must be non-negative")
    return args


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(level=getattr(logging, args.log_level), log_file=args.log_file)

    store = GridStore()
    try:
        store.load(args.data)
    except (OSError, ValueError) as e:
        logger.error(f"Could not load grid from '{args.data}': {e}")
        print(json.dumps({"ok": False, "error": str(e)}))
        return 2

    if args.command == 'forward':
        result = store.map_forward(args.a, args.b)
        payload, ok = result.to_dict(), result.ok
    elif args.command == 'inverse':
        if args.corner:
            result = store.map_inverse_corner_fallback(args.x, args.y, args.levels)
        else:
            result = store.map_inverse(args.x, args.y, args.levels)
        payload, ok = result.to_dict(), result.ok
    elif args.command == 'scenario':
        result = project_scenario(
            store.grid, args.x, args.y, args.factor_a, args.factor_b,
            levels=args.levels, corner_fallback=args.corner
        )
        payload, ok = result.to_dict(), result.ok
    elif args.command == 'snapshot':
        try:
            store.save_snapshot(args.output)
        except OSError as e:
            logger.error(f"Could not save snapshot to '{args.output}': {e}")
            print(json.dumps({"ok": False, "error": str(e)}))
            return 2
        payload = {"ok": True, "snapshot": args.output, "samples": len(store.grid)}
        ok = True
    else:
        payload = {
            "ok": True,
            "isopleths": [
                {"axis": str(iso.axis), "value": iso.value, "points": len(iso)}
                for iso in extract_isopleths(store.grid)
            ],
        }
        ok = True

    print(json.dumps(payload, indent=2))
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
