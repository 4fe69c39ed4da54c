"""devhelper -- interactive starter-project initializer."""

__version__ = "0.1.0"
