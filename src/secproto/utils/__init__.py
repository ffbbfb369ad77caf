"""Utility helpers for secproto."""
