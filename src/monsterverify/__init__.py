"""Monster Future AI email verification backend."""

__version__ = "0.1.0"
