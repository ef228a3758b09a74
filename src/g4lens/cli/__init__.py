"""g4lens command-line interface."""
