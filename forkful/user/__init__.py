"""User profile lookups."""
