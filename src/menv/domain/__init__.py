"""Domain layer — names, source kinds, PATH lists, profile and descriptor grammars.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
