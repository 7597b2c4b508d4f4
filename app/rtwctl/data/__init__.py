"""Bundled data files for rtwctl."""
