"""Asynchronous analysis endpoints."""
