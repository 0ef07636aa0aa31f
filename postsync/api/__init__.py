"""HTTP surface for the migration application."""
