"""Wrapped operations grouped by native subsystem."""
