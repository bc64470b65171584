"""Convert a GitHub repository into a single flattened text file."""

__version__ = "0.3.0"
