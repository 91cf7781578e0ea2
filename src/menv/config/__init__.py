"""Configuration — layered settings, TOML discovery, and logging setup."""
