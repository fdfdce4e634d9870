"""Shared pytest fixtures for unit and integration tests."""
