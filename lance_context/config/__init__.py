"""Configuration module: exports Settings."""

from lance_context.config.settings import Settings

__all__ = ["Settings"]
