"""Client for the campus placement portal API."""
