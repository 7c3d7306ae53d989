"""Offline report helpers."""
