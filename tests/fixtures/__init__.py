"""Shared test data for billios tests."""
