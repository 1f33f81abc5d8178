"""
Progressive Feature Unlocks

New users start with only the inbox. Other capabilities appear as the user
levels up, completes tasks, or earns specific achievements. Any one
criterion is enough, and an unlocked feature is never locked again.
"""

from typing import Iterable, List, Optional
import logging

from pydantic import ValidationError as PydanticValidationError

from adhd_focus.exceptions import CatalogError
from adhd_focus.models.feature import FeatureCode, FeatureDefinition, FeatureUnlockResult

logger = logging.getLogger(__name__)

ALWAYS_UNLOCKED = frozenset({FeatureCode.INBOX})

DEFAULT_FEATURES: List[FeatureDefinition] = [
    FeatureDefinition(code=FeatureCode.INBOX, name="Inbox", description="Capture tasks quickly without organizing", unlock_level=0, sort_order=1),
    FeatureDefinition(code=FeatureCode.TODAY, name="Today", description="Focus on your daily tasks", unlock_level=2, unlock_task_count=3, sort_order=2),
    FeatureDefinition(code=FeatureCode.PRIORITY, name="Priority", description="Set task priorities (must/should/want/someday)", unlock_level=3, unlock_task_count=5, sort_order=3),
    FeatureDefinition(code=FeatureCode.ENERGY, name="Energy Levels", description="Match tasks to your energy level", unlock_level=4, unlock_task_count=10, sort_order=4),
    FeatureDefinition(code=FeatureCode.PROJECTS, name="Projects", description="Organize tasks into projects", unlock_level=5, unlock_task_count=15, sort_order=5),
    FeatureDefinition(code=FeatureCode.SCHEDULED, name="Scheduled", description="Plan tasks for future days", unlock_level=6, sort_order=6),
    FeatureDefinition(code=FeatureCode.DESCRIPTION, name="Descriptions", description="Add detailed notes to tasks", unlock_level=7, unlock_task_count=20, sort_order=7),
    FeatureDefinition(code=FeatureCode.QUICK_ACTIONS, name="Quick Actions", description="Speed through small tasks", unlock_level=8, sort_order=8),
    FeatureDefinition(code=FeatureCode.TAGS, name="Tags", description="Categorize tasks with tags", unlock_level=9, sort_order=9),
    FeatureDefinition(code=FeatureCode.FOCUS_MODE, name="Focus Mode", description="Pomodoro timer for deep work", unlock_level=10, sort_order=10),
    FeatureDefinition(code=FeatureCode.STATS, name="Statistics", description="Track your productivity", unlock_level=12, sort_order=11),
    FeatureDefinition(code=FeatureCode.THEMES, name="Themes", description="Customize app appearance", unlock_level=15, sort_order=12),
    FeatureDefinition(code=FeatureCode.SETTINGS, name="Settings", description="Full app configuration", unlock_level=18, sort_order=13),
    FeatureDefinition(code=FeatureCode.NOTIFICATIONS, name="Notifications", description="Get reminders and alerts", unlock_level=20, sort_order=14),
    FeatureDefinition(code=FeatureCode.ADVANCED_STATS, name="Advanced Stats", description="Deep productivity analytics", unlock_level=25, sort_order=15),
    FeatureDefinition(code=FeatureCode.CHECKLIST, name="Daily Checklist", description="Track daily habits", unlock_level=4, unlock_achievement_code="streak_3", sort_order=16),
]


def load_feature_catalog(rows: Iterable[dict]) -> List[FeatureDefinition]:
    """
    Validate raw catalog rows (e.g. from the features table)

    Raises:
        CatalogError: unknown feature code, malformed row, or duplicate code
    """
    catalog: List[FeatureDefinition] = []
    seen = set()

    for row in rows:
        code = row.get("code")
        try:
            definition = FeatureDefinition.model_validate(row)
        except PydanticValidationError as e:
            raise CatalogError(
                f"Invalid feature definition '{code}': {e.errors()[0]['msg']}",
                catalog="features",
                code=code,
                cause=e,
            )
        if definition.code in seen:
            raise CatalogError(f"Duplicate feature code '{code}'", catalog="features", code=code)
        seen.add(definition.code)
        catalog.append(definition)

    return sorted(catalog, key=lambda f: f.sort_order)


def _meets_criteria(
    feature: FeatureDefinition,
    level: int,
    total_tasks_completed: int,
    unlocked_achievements: frozenset,
) -> bool:
    if level >= feature.unlock_level:
        return True
    if feature.unlock_task_count is not None and total_tasks_completed >= feature.unlock_task_count:
        return True
    if feature.unlock_achievement_code is not None and feature.unlock_achievement_code in unlocked_achievements:
        return True
    return False


def check_feature_unlocks(
    level: int,
    total_tasks_completed: int,
    unlocked_achievements: Iterable[str],
    catalog: Iterable[FeatureDefinition],
    already_unlocked: Optional[Iterable[FeatureCode]] = None,
) -> FeatureUnlockResult:
    """
    Determine which features are unlocked now

    Args:
        level: Current level
        total_tasks_completed: Lifetime completed tasks
        unlocked_achievements: Achievement codes the user holds
        catalog: Feature definitions
        already_unlocked: Previously unlocked codes (kept regardless of criteria)

    Returns:
        FeatureUnlockResult with the full set and the newly unlocked codes,
        in catalog sort order
    """
    achievements = frozenset(unlocked_achievements)
    unlocked = set(already_unlocked or ()) | ALWAYS_UNLOCKED
    newly_unlocked: List[FeatureCode] = []

    for feature in sorted(catalog, key=lambda f: f.sort_order):
        if feature.code in unlocked:
            continue
        if _meets_criteria(feature, level, total_tasks_completed, achievements):
            unlocked.add(feature.code)
            newly_unlocked.append(feature.code)
            logger.info(f"Feature unlocked: {feature.code.value}")

    return FeatureUnlockResult(unlocked=frozenset(unlocked), newly_unlocked=newly_unlocked)


def is_feature_unlocked(code: FeatureCode, unlocked: Iterable[FeatureCode]) -> bool:
    """Gate check for UI routes"""
    return code in ALWAYS_UNLOCKED or code in set(unlocked)
