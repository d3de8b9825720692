"""NC program generation."""
