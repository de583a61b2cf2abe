"""Cypress checkers."""
