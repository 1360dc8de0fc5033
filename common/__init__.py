"""Shared command, file, logging and system helpers."""
