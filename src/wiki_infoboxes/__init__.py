"""Harvest chemical identifiers from Wikipedia Chembox and Drugbox infoboxes."""

__version__ = "0.1.0"
