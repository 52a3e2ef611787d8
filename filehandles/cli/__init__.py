"""filehandles command line interface."""
