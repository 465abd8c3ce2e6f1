"""Flet UI: theme, shell layout and shared components."""
