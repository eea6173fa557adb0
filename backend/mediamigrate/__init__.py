"""Upgrade-time data migrations for the media library database."""

__version__ = "0.1.0"
