"""Configuration package for the Flavor Mix service."""
