"""Chirpy: short posts, their authors, and token-based sessions over a JSON-file store."""
