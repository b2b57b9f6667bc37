"""Content-addressed ZIP datastore layer.

This package maps CID keys to archive entry names and persists
records as entries of a single ZIP archive.
"""
