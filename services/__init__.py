"""Workout, summary, seeding and auth services."""
