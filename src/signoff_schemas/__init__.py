"""Package data: JSON Schemas for signoff state files."""
