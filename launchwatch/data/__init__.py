"""Backend data access."""
