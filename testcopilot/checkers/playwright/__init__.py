"""Playwright checkers."""
