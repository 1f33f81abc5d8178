"""
Services for ADHD Focus gamification

Async host boundary: persistence plus per-user serialization around the
pure engine in adhd_focus.gamification.
"""

from adhd_focus.services.store import InMemoryGameStore
from adhd_focus.services.gamification_service import GamificationService

__all__ = ["InMemoryGameStore", "GamificationService"]
