"""HTTP transport setup."""
