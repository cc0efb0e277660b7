"""Textual widgets for the ranking TUI."""
