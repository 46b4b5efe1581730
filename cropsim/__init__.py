"""cropsim: crop growth, harvest and chunk persistence engine."""

__version__ = "0.1.0"
