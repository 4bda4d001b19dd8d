"""HTTP API for dirdigest."""
