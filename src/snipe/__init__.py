"""Snipe - run a unit test by its bare name."""

__version__ = "0.1.0"
