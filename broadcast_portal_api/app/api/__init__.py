"""HTTP API package; versioned routers live in subpackages."""
