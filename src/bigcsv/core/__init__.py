"""Ambient infrastructure: settings loading and logging."""
