"""Pydantic schemas for request bodies and responses."""
