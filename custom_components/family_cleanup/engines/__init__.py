"""Engine modules for Family Cleanup integration.

Contains pure computation engines:
- family_engine: Local task model, remote merge and cache conversion
"""

# Use relative imports within package to avoid mypy module resolution issues
from .family_engine import (
    DuplicatePersonError,
    FamilyCleanupError,
    FamilyEngine,
    PersonNotFoundError,
    TaskNotFoundError,
)

__all__ = [
    "DuplicatePersonError",
    "FamilyCleanupError",
    "FamilyEngine",
    "PersonNotFoundError",
    "TaskNotFoundError",
]
