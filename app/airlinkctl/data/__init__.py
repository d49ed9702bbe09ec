"""Bundled data files (theme, addon catalog)."""
