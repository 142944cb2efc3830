"""Build groups, the scope stack, and per-group config emission."""
