"""Infrastructure adapters (cache, persistence, providers, filesystem, logging)."""
