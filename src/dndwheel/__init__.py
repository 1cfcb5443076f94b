"""Decision wheel with a weighted, replayable spin engine."""

__version__ = "0.1.0"
