"""Minisites: multi-tenant website renderer."""
