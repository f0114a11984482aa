"""Fingerprint-based repository scoring, tagging and drift reporting."""

__version__ = "0.1.0"
