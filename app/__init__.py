"""FastAPI transport for the exporter."""
