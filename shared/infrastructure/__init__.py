"""Infrastructure adapters shared across apps."""
