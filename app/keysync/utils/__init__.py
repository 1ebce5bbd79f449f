"""Utility modules for keysync."""
