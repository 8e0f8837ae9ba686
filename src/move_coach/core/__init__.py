"""Rule engine and domain models."""
