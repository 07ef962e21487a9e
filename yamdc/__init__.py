"""Movie library toolkit: file name number parsing, metadata types, NFO files, images and handlers."""

__version__ = "0.1.0"