"""Input preparation: reading tables into plain rows for the model layer."""
