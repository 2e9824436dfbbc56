"""Compare configuration with its manifest and keep records and analyses of the drift."""

__version__ = "0.1.0"