"""Logging, errors and shared helpers."""
