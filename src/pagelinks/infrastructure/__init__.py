"""Infrastructure layer — the in-memory graph store.

Infrastructure may import from domain but never from services or commands.
"""
