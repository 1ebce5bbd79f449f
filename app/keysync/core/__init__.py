"""Reconciliation core for keysync."""
