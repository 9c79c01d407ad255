"""In-memory token state."""
