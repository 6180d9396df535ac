"""Synchronous profile endpoints."""
