"""Hierarchical outlines of Markdown documents, with each node's position encoded in its filenames."""

__version__ = "0.1.0"