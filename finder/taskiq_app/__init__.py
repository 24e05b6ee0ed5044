"""Background task queue."""
