"""TestCopilot: static reliability checks for Cypress and Playwright test files."""

__version__ = "0.1.0"
