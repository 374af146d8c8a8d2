"""HTTP client for the task/auth backend."""
