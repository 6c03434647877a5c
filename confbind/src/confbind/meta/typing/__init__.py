"""Typing utilities for confbind: annotation helpers and string coercion."""
