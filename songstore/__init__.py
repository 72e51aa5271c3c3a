"""Persistence and lookup layer for an audio fingerprint index and song catalog."""
