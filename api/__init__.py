"""HTTP API for the markup preview service."""
