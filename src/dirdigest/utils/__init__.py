"""Utility helpers for dirdigest."""
