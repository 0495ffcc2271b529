"""Routing core — group registry, listener registry and dispatcher."""
