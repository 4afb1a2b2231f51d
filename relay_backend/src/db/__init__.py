"""Database service access: configuration and the fixed read query client."""
