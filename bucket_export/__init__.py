"""Export the contents of an S3-compatible object store to a local directory tree."""

__version__ = "0.1.0"
