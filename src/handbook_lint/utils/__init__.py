"""Utility helpers for handbook_lint."""
