"""Shared helpers: error kinds and logging utilities."""
