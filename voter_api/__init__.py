"""Voter registration and poll participation storage."""

__version__ = "0.1.0"
