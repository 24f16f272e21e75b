"""Shared helpers: git command runner and failure logging."""
