"""Concrete adapters for the interfaces in ``lance_context.interfaces``."""
