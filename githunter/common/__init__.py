"""Shared helpers used across GitHunter packages."""
