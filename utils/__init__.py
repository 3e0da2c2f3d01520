"""Logging and debug-output helpers."""
