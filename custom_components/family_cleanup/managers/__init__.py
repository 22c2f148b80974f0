"""Manager modules for Family Cleanup integration.

Managers orchestrate workflows and coordinate between engines.
They are stateful and handle cross-cutting concerns.
"""

from .mutation_manager import MutationManager

__all__ = [
    "MutationManager",
]
