"""JSON-schema contracts for filekit reports."""
