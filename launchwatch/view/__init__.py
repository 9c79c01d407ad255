"""Snapshot ordering and row helpers."""
