"""Packaged reference data files."""
