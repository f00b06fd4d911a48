"""Domain layer: session states, transition policy, dock guard, models.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
