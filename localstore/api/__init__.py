"""HTTP API for LocalStore."""
