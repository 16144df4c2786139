"""Kalat: a small personal media archive (API server and async client)."""

__version__ = "0.1.0"
