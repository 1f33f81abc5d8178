"""Configuration management"""
import os
import logging
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from dotenv import load_dotenv

from adhd_focus.exceptions import ConfigurationError

load_dotenv()

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# Clock
# Streak days and creature time windows are evaluated in this zone
APP_TIMEZONE: str = os.getenv("APP_TIMEZONE", "UTC")

# Creatures
CREATURE_SPAWN_CHANCE: float = float(os.getenv("CREATURE_SPAWN_CHANCE", "0.30"))
ENABLE_CREATURE_SPAWNS: bool = os.getenv("ENABLE_CREATURE_SPAWNS", "true").lower() == "true"

# Rewards
ENABLE_REWARD_ROLLS: bool = os.getenv("ENABLE_REWARD_ROLLS", "true").lower() == "true"

# Quests
DAILY_QUEST_COUNT: int = int(os.getenv("DAILY_QUEST_COUNT", "3"))

# Host store
STATE_WRITE_RETRIES: int = int(os.getenv("STATE_WRITE_RETRIES", "3"))


def configure_logging() -> None:
    """Configure root logging for hosts embedding the engine"""
    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=getattr(logging, LOG_LEVEL, logging.INFO)
    )


# Validation
def validate_config() -> None:
    """Validate configuration values"""
    if LOG_LEVEL not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        raise ConfigurationError(f"Unknown LOG_LEVEL '{LOG_LEVEL}'", config_key="LOG_LEVEL")
    try:
        ZoneInfo(APP_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(
            f"Unknown APP_TIMEZONE '{APP_TIMEZONE}'", config_key="APP_TIMEZONE", cause=e
        )
    if not 0.0 <= CREATURE_SPAWN_CHANCE <= 1.0:
        raise ConfigurationError(
            "CREATURE_SPAWN_CHANCE must be between 0 and 1", config_key="CREATURE_SPAWN_CHANCE"
        )
    if DAILY_QUEST_COUNT < 1:
        raise ConfigurationError("DAILY_QUEST_COUNT must be at least 1", config_key="DAILY_QUEST_COUNT")
    if STATE_WRITE_RETRIES < 1:
        raise ConfigurationError("STATE_WRITE_RETRIES must be at least 1", config_key="STATE_WRITE_RETRIES")
