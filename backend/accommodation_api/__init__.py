"""Accommodation service backend package."""
