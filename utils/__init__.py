"""Shared display helpers."""
