"""
FILE: questboard/repl/style.py
PURPOSE: Small celebration messages for CLI/REPL feedback
EXPORTS:
  - celebrate_done() -> str
  - celebrate_add() -> str
  - celebrate_delete() -> str
  - celebrate_purchase() -> str
  - confetti_burst(width) -> str
DEPENDENCIES:
  - random (for variety)
NOTES:
  - Plain rich-markup strings, callers print them
  - confetti_burst() is only shown once the confetti upgrade is owned
"""

import random


DONE_CELEBRATIONS = [
    "✨ *sparkle* ✨",
    "🎉 *pop* 🎉",
    "⭐ *shine* ⭐",
    "💫 *twinkle* 💫",
    "🌟 *flash* 🌟",
]

ADD_CELEBRATIONS = [
    "✓ *noted* ✓",
    "+ *added* +",
    "📝 *captured* 📝",
]

DELETE_ANIMATIONS = [
    "💨 *poof* 💨",
    "× *removed* ×",
    "∅ *gone* ∅",
]

PURCHASE_CELEBRATIONS = [
    "🛍️ *cha-ching* 🛍️",
    "💰 *spent well* 💰",
    "🎁 *unlocked* 🎁",
]

_CONFETTI_PIECES = "*+.o~"
_CONFETTI_COLORS = ["red", "yellow", "green", "cyan", "magenta", "blue", "bright_white"]


def celebrate_done() -> str:
    """
    Return a random celebration for completing a task.

    Example:
        "✨ *sparkle* ✨"
    """
    return random.choice(DONE_CELEBRATIONS)


def celebrate_add() -> str:
    return random.choice(ADD_CELEBRATIONS)


def celebrate_delete() -> str:
    return random.choice(DELETE_ANIMATIONS)


def celebrate_purchase() -> str:
    return random.choice(PURCHASE_CELEBRATIONS)


def confetti_burst(width: int = 40) -> str:
    """One line of randomly colored confetti, as rich markup."""
    pieces = []
    for _ in range(width):
        color = random.choice(_CONFETTI_COLORS)
        pieces.append(f"[{color}]{random.choice(_CONFETTI_PIECES)}[/{color}]")
    return "".join(pieces)
