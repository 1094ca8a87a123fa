"""Bundled data files for vibectl."""
