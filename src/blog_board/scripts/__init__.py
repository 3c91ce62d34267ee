"""Maintenance entry points: migrations and table creation."""
