"""Release pipeline driver for a curated package-set distribution."""

__version__ = "0.4.0"
