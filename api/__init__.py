"""HTTP API for browser voice clients."""
