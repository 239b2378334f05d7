"""Shared content models."""
