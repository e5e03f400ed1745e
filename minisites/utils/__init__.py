"""Minisites utilities."""
