"""HTTP API for the Nexus identity service."""
