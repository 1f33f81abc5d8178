"""
GamificationService - Host Boundary for the Gamification Engine

Reads a user's state from the store, runs the pure engine, and writes the
result back. Each user's read -> orchestrate -> write cycle is serialized
with a per-user asyncio.Lock; writes are additionally guarded by the
store's version check and retried on conflict, for stores shared between
processes.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

from adhd_focus import config
from adhd_focus.exceptions import (
    FocusEngineError,
    RecordNotFoundError,
    StateConflictError,
    wrap_store_exception,
)
from adhd_focus.gamification.orchestrator import GamificationEngine, default_clock
from adhd_focus.gamification.quests import ensure_daily_quests, find_quest, update_quest_progress
from adhd_focus.gamification.rewards import log_reward
from adhd_focus.models.event import (
    EventType,
    GamificationEvent,
    GamificationEventResult,
    RewardRoll,
)
from adhd_focus.models.game_state import UserGameState, new_user_state
from adhd_focus.models.quest import DailyQuest, QuestProgressResult

logger = logging.getLogger(__name__)


class GamificationService:
    """
    Service for gamification features.

    Responsibilities:
    - Per-user serialization of state updates
    - Optimistic-concurrency retries against the store
    - Persisting creature ownership, daily quests and reward logs
    - Lazy daily quest creation and quest completion XP
    """

    def __init__(
        self,
        store,
        engine: Optional[GamificationEngine] = None,
        clock: Optional[Callable[[], datetime]] = None,
        max_retries: Optional[int] = None,
        quest_count: Optional[int] = None,
    ):
        """
        Initialize GamificationService.

        Args:
            store: Persistence backend (see InMemoryGameStore for the interface)
            engine: Engine instance; a default-catalog engine if omitted
            clock: Returns the current datetime; injected for tests
            max_retries: Attempts per event when the store reports a conflict
            quest_count: Daily quests per user
        """
        self.store = store
        self.engine = engine or GamificationEngine()
        self.clock = clock or default_clock
        self.max_retries = max_retries or config.STATE_WRITE_RETRIES
        self.quest_count = quest_count or config.DAILY_QUEST_COUNT
        self._user_locks: Dict[str, asyncio.Lock] = {}
        self._lock_users: Dict[str, int] = {}
        logger.debug("GamificationService initialized")

    @asynccontextmanager
    async def _user_lock(self, user_id: str):
        """
        Hold the user's lock for one read -> orchestrate -> write cycle.

        A lock lives only while someone holds or waits for it, so the map is
        bounded by the number of users with an operation in flight.
        """
        lock = self._user_locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._user_locks[user_id] = lock
        self._lock_users[user_id] = self._lock_users.get(user_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[user_id] -= 1
            if self._lock_users[user_id] == 0:
                del self._lock_users[user_id]
                del self._user_locks[user_id]

    async def create_user(self, user_id: str) -> UserGameState:
        """Create the default state for a new account"""
        state = new_user_state()
        await self.store.create_user_state(user_id, state)
        logger.info(f"Created game state for user {user_id}")
        return state

    async def get_user_state(self, user_id: str) -> UserGameState:
        state, _ = await self.store.get_user_state(user_id)
        return state

    async def process_event(self, user_id: str, event: GamificationEvent) -> GamificationEventResult:
        """
        Process gamification for one triggering event.

        Args:
            user_id: User ID
            event: Event type, XP amount and context flags

        Returns:
            GamificationEventResult (already persisted)

        Raises:
            RecordNotFoundError: user has no game state
            InvalidInputError: event rejected by the engine
            StateConflictError: retries exhausted
        """
        async with self._user_lock(user_id):
            return await self._process_event_locked(user_id, event)

    async def _process_event_locked(self, user_id: str, event: GamificationEvent) -> GamificationEventResult:
        now = self.clock()

        for attempt in range(1, self.max_retries + 1):
            try:
                state, version = await self.store.get_user_state(user_id)
                owned = await self.store.get_owned_creatures(user_id)

                result = self.engine.process_event(state, event, now, owned)

                await self.store.save_user_state(user_id, result.state, version)
            except StateConflictError:
                if attempt == self.max_retries:
                    raise
                logger.warning(
                    f"State conflict for user {user_id} on attempt {attempt}/{self.max_retries}, retrying"
                )
                continue
            except FocusEngineError:
                raise
            except Exception as e:
                raise wrap_store_exception(e, operation="process_event", user_id=user_id)

            await self._persist_extras(user_id, result)

            logger.info(
                f"Gamification processed for {event.event_type.value}: user={user_id}, "
                f"xp={result.xp_awarded + result.bonus_xp}, level={result.new_level}, "
                f"streak={result.state.current_streak}"
            )
            return result

        # max_retries >= 1, so the loop always returns or raises
        raise StateConflictError(f"Could not save state for user {user_id}", user_id=user_id)

    async def _persist_extras(self, user_id: str, result: GamificationEventResult) -> None:
        """
        Write creature ownership and the reward log after the state commit.

        The state is already saved at this point, so failures here are
        logged and reported in `degraded_steps`, never raised.
        """
        if result.creature_spawned is not None and result.creature_spawned.creature is not None:
            try:
                await self.store.save_owned_creatures(user_id, result.owned_creatures)
            except Exception as e:
                logger.warning(f"Could not save creatures for user {user_id}: {e}", exc_info=True)
                result.degraded_steps.append("creature_spawn")

        if result.reward_log_entry is not None:
            try:
                await self.store.add_reward_log(user_id, result.reward_log_entry)
            except Exception as e:
                logger.warning(f"Could not log reward for user {user_id}: {e}", exc_info=True)
                result.degraded_steps.append("reward_log")

    async def get_daily_quests(self, user_id: str) -> List[DailyQuest]:
        """Return today's quests, creating them on the first fetch of the day"""
        async with self._user_lock(user_id):
            today = self.clock().date()
            state, _ = await self.store.get_user_state(user_id)
            existing = await self.store.get_daily_quests(user_id, today)

            quests, created = ensure_daily_quests(
                existing, user_id, state.level, today, count=self.quest_count
            )
            if created:
                await self.store.save_daily_quests(user_id, today, quests)
            return quests

    async def advance_quest(
        self,
        user_id: str,
        quest_type: str,
        increment: int = 1,
    ) -> Tuple[QuestProgressResult, Optional[GamificationEventResult]]:
        """
        Add progress to one of today's quests.

        Completing a quest fires a quest_complete event worth the quest's
        XP reward. The quest row is saved only after that event succeeded,
        so a failed event leaves the quest open for a retry.

        Raises:
            RecordNotFoundError: no quest of that type today
        """
        async with self._user_lock(user_id):
            today = self.clock().date()
            quests = await self.store.get_daily_quests(user_id, today)
            quest = find_quest(quests, quest_type)
            if quest is None:
                raise RecordNotFoundError(
                    f"No '{quest_type}' quest for user {user_id} on {today}",
                    record_type="DailyQuest",
                    record_id=quest_type,
                    user_id=user_id,
                    operation="advance_quest",
                )

            progress = update_quest_progress(quest, increment)
            if progress.quest == quest:
                return progress, None

            event_result = None
            if progress.just_completed:
                event_result = await self._process_event_locked(
                    user_id,
                    GamificationEvent(
                        event_type=EventType.QUEST_COMPLETE,
                        xp_amount=progress.xp_awarded,
                        source_id=str(quest.id),
                    ),
                )

            updated = [progress.quest if q.id == quest.id else q for q in quests]
            await self.store.save_daily_quests(user_id, today, updated)
            return progress, event_result

    async def log_reward(self, user_id: str, roll: RewardRoll, trigger: Optional[str] = None) -> UserGameState:
        """
        Record a reward rolled outside an event (e.g. a mindfulness break)
        and track the rarest reward seen.
        """
        async with self._user_lock(user_id):
            now = self.clock()
            for attempt in range(1, self.max_retries + 1):
                state, version = await self.store.get_user_state(user_id)
                new_state, entry = log_reward(state, roll, trigger=trigger, logged_at=now)
                try:
                    if new_state is not state:
                        await self.store.save_user_state(user_id, new_state, version)
                except StateConflictError:
                    if attempt == self.max_retries:
                        raise
                    continue
                await self.store.add_reward_log(user_id, entry)
                return new_state

        raise StateConflictError(f"Could not save state for user {user_id}", user_id=user_id)
