"""Cryptax: crypto tax lots, income allocation, and mining economics."""

__version__ = "0.1.0"
