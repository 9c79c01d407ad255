"""Core data types, interfaces and errors."""
