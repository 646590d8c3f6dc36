"""Structured metadata lookups on raw HTML."""
