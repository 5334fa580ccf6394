"""Shared building blocks for the menucom payment services."""
