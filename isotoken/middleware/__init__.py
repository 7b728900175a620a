"""HTTP integration: request extraction, auth dependency, error responses."""
