"""Base abstractions for confbind."""
