"""HTTP API for the scoring engine."""
