"""Domain layer — page/link types and the command line grammar.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
