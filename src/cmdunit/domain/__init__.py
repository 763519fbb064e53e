"""Domain layer — parameter declarations, command schemas, and errors.

This layer depends only on stdlib and pydantic.
It must never import from engine, services, plugins, commands, or config.
"""
