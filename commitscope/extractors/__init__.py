"""Dataset extractors."""
