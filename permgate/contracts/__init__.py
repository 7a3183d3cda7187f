"""Shipped JSON Schemas for permgate configuration files."""
