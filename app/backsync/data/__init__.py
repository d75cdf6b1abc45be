"""Bundled data files for backsync."""
