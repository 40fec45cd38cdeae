"""HTTP API for NARA."""
