"""Object-oriented wrappers over filesystem primitives with advisory locking."""

__version__ = "0.1.0"
