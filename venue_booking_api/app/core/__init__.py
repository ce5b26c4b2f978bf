"""Configuration, database access, security and error handling."""
