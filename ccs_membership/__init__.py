"""Community Ceramics Studio membership service."""

__version__ = "0.1.0"
