"""Utility modules for tix."""
