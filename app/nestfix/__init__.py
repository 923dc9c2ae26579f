"""nestfix - collapse redundantly nested directories."""

__version__ = "0.1.0"
