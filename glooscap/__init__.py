"""Glooscap: wiki page catalog and translation job dispatch."""

__version__ = "0.1.0"
