"""Introspection utilities for confbind."""
