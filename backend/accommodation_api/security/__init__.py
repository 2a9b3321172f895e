"""Caller identity, role checks and log scrubbing."""
