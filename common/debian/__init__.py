"""Debian/Ubuntu package management helpers."""
