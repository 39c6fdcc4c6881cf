"""Personalized video feed ranking."""

__version__ = "0.1.0"
