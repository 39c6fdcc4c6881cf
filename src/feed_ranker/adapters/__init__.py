"""Adapters around the feed engine."""
