"""Shortify - short, unique links with optional expiration."""
