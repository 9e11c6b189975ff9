"""Utility helpers for climate-tiles."""
