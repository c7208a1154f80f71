"""
Configuration - Environment settings and match rule constants.

Environment variables (read once at import):
    CARDCHAIN_ENV        deployment name (default: development)
    CARDCHAIN_LOG_LEVEL  logging level name (default: INFO)
    CARDCHAIN_CATALOG    optional path to a JSON card catalog
    ALLOWED_ORIGINS      comma separated CORS origins for the API
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
import os

CARDCHAIN_ENV = os.getenv("CARDCHAIN_ENV", "development")
CARDCHAIN_LOG_LEVEL = os.getenv("CARDCHAIN_LOG_LEVEL", "INFO")
CARDCHAIN_CATALOG = os.getenv("CARDCHAIN_CATALOG", None)
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Ledger constants
BOARD_SLOTS = 4
HAND_LIMIT = 10
MAX_ENERGY_CAP = 10
STARTING_HP = 20
OPENING_HAND_SIZE = 3


@dataclass(frozen=True)
class RulesConfig:
    """
    Match rules injected into the engine.

    Defaults mirror the ledger. draw_on_handover is off because the ledger
    picks the drawn card from block data that clients cannot see.
    """
    hand_limit: int = HAND_LIMIT
    max_energy_cap: int = MAX_ENERGY_CAP
    starting_hp: int = STARTING_HP
    ramp_max_energy: bool = True
    draw_on_handover: bool = False


def configure_logging(level: str | int | None = None) -> None:
    """Set up root logging for the CLI and the API server."""
    if level is None:
        level = CARDCHAIN_LOG_LEVEL
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
