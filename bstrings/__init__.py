"""bstrings -- extract printable ASCII and UTF-16LE strings from binary files."""

__version__ = "1.0.0"
