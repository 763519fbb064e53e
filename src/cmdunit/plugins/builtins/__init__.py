"""Plugins shipped with cmdunit."""
