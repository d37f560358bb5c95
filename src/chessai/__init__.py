"""Chess rules engine with a five-level move-selection AI."""

__version__ = "0.1.0"
