"""Core configuration for the blog board."""
