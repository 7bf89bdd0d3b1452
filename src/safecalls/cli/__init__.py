"""Diagnostic command-line interface."""
