"""Shared infrastructure for dumpcatalog."""
