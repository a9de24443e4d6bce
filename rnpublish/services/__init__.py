"""Publish services."""
