"""Event projects, persisted chart configurations and the report API."""
