"""Core configuration and logging for authcore."""
