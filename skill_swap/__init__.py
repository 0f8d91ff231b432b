"""Skill Swap API: peer-to-peer skill exchange service."""

__version__ = "1.0.0"
