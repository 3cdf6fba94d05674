"""Conversion commands."""
