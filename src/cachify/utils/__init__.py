"""Utility helpers for cachify."""
