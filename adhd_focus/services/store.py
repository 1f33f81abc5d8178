"""
In-Memory Game Store

Reference implementation of the persistence boundary the service layer
talks to. A production host backs the same methods with its database.

Each user's state carries a version number; save_user_state() only
succeeds when the caller read the latest version (optimistic concurrency).
"""

from datetime import date
from typing import Dict, List, Optional, Tuple
import logging

from adhd_focus.exceptions import RecordNotFoundError, StateConflictError
from adhd_focus.models.event import RewardLogEntry
from adhd_focus.models.game_state import UserGameState
from adhd_focus.models.quest import DailyQuest

logger = logging.getLogger(__name__)


class InMemoryGameStore:
    """Async in-memory store for game state, creatures, quests and reward logs"""

    def __init__(self):
        self._states: Dict[str, Tuple[UserGameState, int]] = {}
        self._creatures: Dict[str, Dict[str, int]] = {}
        self._quests: Dict[Tuple[str, date], List[DailyQuest]] = {}
        self._reward_logs: Dict[str, List[RewardLogEntry]] = {}

    async def create_user_state(self, user_id: str, state: UserGameState) -> int:
        if user_id in self._states:
            raise StateConflictError(
                f"Game state already exists for user {user_id}",
                user_id=user_id,
                operation="create_user_state",
            )
        self._states[user_id] = (state, 1)
        logger.debug(f"Created game state for user {user_id}")
        return 1

    async def get_user_state(self, user_id: str) -> Tuple[UserGameState, int]:
        """
        Returns:
            (state, version)

        Raises:
            RecordNotFoundError: no state for this user
        """
        try:
            return self._states[user_id]
        except KeyError:
            raise RecordNotFoundError(
                f"No game state for user {user_id}",
                record_type="UserGameState",
                record_id=user_id,
                user_id=user_id,
                operation="get_user_state",
            )

    async def save_user_state(self, user_id: str, state: UserGameState, expected_version: int) -> int:
        """
        Write a new state if nobody else wrote since `expected_version`

        Returns:
            The new version

        Raises:
            RecordNotFoundError: no state for this user
            StateConflictError: version moved on since the caller's read
        """
        _, current_version = await self.get_user_state(user_id)
        if current_version != expected_version:
            raise StateConflictError(
                f"Stale write for user {user_id}",
                expected_version=expected_version,
                actual_version=current_version,
                user_id=user_id,
                operation="save_user_state",
            )
        new_version = current_version + 1
        self._states[user_id] = (state, new_version)
        return new_version

    async def get_owned_creatures(self, user_id: str) -> Dict[str, int]:
        return dict(self._creatures.get(user_id, {}))

    async def save_owned_creatures(self, user_id: str, owned: Dict[str, int]) -> None:
        self._creatures[user_id] = dict(owned)

    async def get_daily_quests(self, user_id: str, quest_date: date) -> List[DailyQuest]:
        return list(self._quests.get((user_id, quest_date), []))

    async def save_daily_quests(self, user_id: str, quest_date: date, quests: List[DailyQuest]) -> None:
        self._quests[(user_id, quest_date)] = list(quests)

    async def add_reward_log(self, user_id: str, entry: RewardLogEntry) -> None:
        self._reward_logs.setdefault(user_id, []).append(entry)

    async def get_reward_logs(self, user_id: str, limit: Optional[int] = None) -> List[RewardLogEntry]:
        """Reward log entries, newest first"""
        logs = list(reversed(self._reward_logs.get(user_id, [])))
        return logs[:limit] if limit is not None else logs
