"""Launch monitor synchronization engine."""
