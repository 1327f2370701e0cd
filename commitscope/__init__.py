"""Commit history analytics and interactive dashboard state."""
