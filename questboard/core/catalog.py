"""
FILE: questboard/core/catalog.py
PURPOSE: Static reference data - difficulty tiers, board columns, shop items
EXPORTS:
  - DifficultyTier, ShopItem, BoardColumn (frozen dataclasses)
  - DIFFICULTIES, COLUMNS, SHOP (tuples, in display order)
  - get_tier(key) -> DifficultyTier
  - tier_rank(key) -> int
  - get_item(item_id) -> ShopItem | None
  - column_label(status) -> str
DEPENDENCIES:
  - dataclasses (stdlib)
  - typing (stdlib)
NOTES:
  - Immutable; nothing in the app mutates these tuples
  - Tiers are ordered by ascending reward, rank is the tuple index
  - Unknown difficulty keys resolve to the "M" tier
"""

from dataclasses import dataclass
from typing import Dict, Optional

from .constants import DEFAULT_DIFFICULTY

KIND_TOGGLE = "toggle"
KIND_UNLOCK = "unlock"

VIDEO_UNLOCK = "video_unlock"
CONFETTI = "confetti"


@dataclass(frozen=True)
class DifficultyTier:
    """A named difficulty bucket with a fixed point reward."""

    key: str
    label: str
    reward_points: int
    style: str


@dataclass(frozen=True)
class ShopItem:
    """Something the ledger can be spent on."""

    id: str
    name: str
    cost: int
    emoji: str
    kind: str


@dataclass(frozen=True)
class BoardColumn:
    key: str
    label: str


DIFFICULTIES = (
    DifficultyTier("XS", "Very easy", 10, "green"),
    DifficultyTier("S", "Easy", 20, "bright_green"),
    DifficultyTier("M", "Medium", 40, "yellow"),
    DifficultyTier("L", "Hard", 80, "dark_orange"),
    DifficultyTier("XL", "Very hard", 120, "red"),
)

COLUMNS = (
    BoardColumn("backlog", "Backlog"),
    BoardColumn("todo", "To-Do"),
    BoardColumn("doing", "In progress"),
    BoardColumn("done", "Done"),
)

SHOP = (
    ShopItem("theme_dark", "Dark theme", 180, "🌙", KIND_TOGGLE),
    ShopItem("round_plus", "Rounded corners", 120, "🫧", KIND_TOGGLE),
    ShopItem("glass_plus", "Glass cards", 140, "🪟", KIND_TOGGLE),
    ShopItem("shadow_plus", "Soft shadows", 100, "☁️", KIND_TOGGLE),
    ShopItem(CONFETTI, "Confetti on completion", 90, "🎉", KIND_TOGGLE),
    ShopItem(VIDEO_UNLOCK, "Background video (unlock)", 60, "📽️", KIND_UNLOCK),
)

_TIERS_BY_KEY: Dict[str, DifficultyTier] = {t.key: t for t in DIFFICULTIES}
_ITEMS_BY_ID: Dict[str, ShopItem] = {i.id: i for i in SHOP}
_COLUMN_LABELS: Dict[str, str] = {c.key: c.label for c in COLUMNS}


def is_known_difficulty(key: str) -> bool:
    return key in _TIERS_BY_KEY


def get_tier(key: Optional[str]) -> DifficultyTier:
    """Look up a tier by key, falling back to the default (M) tier."""
    return _TIERS_BY_KEY.get(key or "", _TIERS_BY_KEY[DEFAULT_DIFFICULTY])


def tier_rank(key: Optional[str]) -> int:
    """Position of the tier in ascending-reward order (XS=0 ... XL=4)."""
    return DIFFICULTIES.index(get_tier(key))


def get_item(item_id: str) -> Optional[ShopItem]:
    return _ITEMS_BY_ID.get(item_id)


def column_label(status: str) -> str:
    return _COLUMN_LABELS.get(status, status)
