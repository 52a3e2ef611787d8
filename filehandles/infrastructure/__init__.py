"""Infrastructure layer: logging setup and processors."""
