"""Grow concept maps with AI sub-topics and re-arrange them under several layouts."""

__version__ = "0.1.0"
