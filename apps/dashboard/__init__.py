"""Read-only statistics for the administration dashboard."""
