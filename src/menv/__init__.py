"""menv — manage user environment variables for GUI apps and shells on macOS."""

__version__ = "0.2.0"
