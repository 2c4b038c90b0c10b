"""Database client adapters."""
