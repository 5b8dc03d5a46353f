"""Populate an EPOS Platform environment with converter plugins and their relations."""

__version__ = "0.1.0"