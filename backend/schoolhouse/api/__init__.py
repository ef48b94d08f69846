"""HTTP API for Schoolhouse."""
