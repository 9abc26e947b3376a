"""lance-context: pluggable text-embedding backends with fallback selection.

Typical use::

    from lance_context.config import Settings
    from lance_context.providers.embedding import create_embedding_backend
    from lance_context.utils.logging import configure_logging_from

    settings = Settings()
    configure_logging_from(settings)  # optional; hosts may keep their own logging
    backend = await create_embedding_backend(settings)
    vectors = await backend.embed_batch(["def main(): ...", "class Foo: ..."])
"""

__version__ = "0.1.0"
