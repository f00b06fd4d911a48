"""Infrastructure layer: database, stores, per-truck locking, Yard repository.

May import from domain.  Must never import from services, commands, or output.
"""
