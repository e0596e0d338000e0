"""Application-level helpers shared across apps."""
