"""Minisites services."""
