"""Config, registry and fallback helpers."""
