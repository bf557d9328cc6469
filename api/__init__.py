"""HTTP routes for OpenScript AI."""
