"""Fetching, refreshing and rendering air-quality metrics."""
