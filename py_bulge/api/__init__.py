"""HTTP API for pattern rendering."""
