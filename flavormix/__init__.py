"""Flavor Mix: hookah flavor-mix recommendations from a flavor catalog and an LLM."""

__version__ = "1.0.0"
