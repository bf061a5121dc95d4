"""In-memory storage for exported gauges."""
