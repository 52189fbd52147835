"""Architectural pattern samples."""
