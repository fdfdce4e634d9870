"""Test configuration package: pytest markers."""
