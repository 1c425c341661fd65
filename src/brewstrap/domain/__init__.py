"""Domain layer — records, parsers, and policies.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
