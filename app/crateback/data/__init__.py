"""Bundled data files for crateback."""
