"""Single-image chess piece classification demo."""

__version__ = "0.0.1"
