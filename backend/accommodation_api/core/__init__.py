"""Core configuration and shared primitives."""
