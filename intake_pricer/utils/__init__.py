"""Utilities package (text helpers, resource loading)."""
