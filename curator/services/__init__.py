"""Application services for the curator CLI."""
