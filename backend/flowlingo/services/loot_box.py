"""Loot box rolls.

Pure functions: every roll takes the catalog and an optional ``rng`` (any
object with ``random()``, e.g. ``random.Random``). Nothing here touches the
database, so the same calls are safe from concurrent requests.
"""

import random

from flowlingo.services.sticker_catalog import (RARITY_ORDER, STICKER_CATALOG,
                                                Rarity, RewardItem)

# Closed allow-list of events that grant a loot box
LOOT_BOX_EVENTS = frozenset(
    {
        "assessment_complete",
        "level_complete",
        "perfect_score",
        "streak_milestone",
        "daily_goal_complete",
    }
)

# Chance of a second, independently rolled sticker
BONUS_CHANCES = {
    "assessment_complete": 0.3,
    "perfect_score": 0.5,
}

MANUAL_OPEN_EVENT = "manual_open"

# Level-up boxes: (sticker_count, cumulative_probability)
BOX_SIZE_REGULAR = [(1, 0.70), (2, 0.95), (3, 1.0)]
BOX_SIZE_EVERY_10 = [(1, 0.50), (2, 0.85), (3, 1.0)]
BOX_SIZE_EVERY_25 = [(2, 0.30), (3, 0.80), (4, 1.0)]

# Level-up boxes: (rarity, cumulative_probability)
RARITY_TABLE_REGULAR = [
    (Rarity.COMMON, 0.50),
    (Rarity.UNCOMMON, 0.80),
    (Rarity.RARE, 0.93),
    (Rarity.EPIC, 0.99),
    (Rarity.LEGENDARY, 1.0),
]
RARITY_TABLE_EVERY_10 = [
    (Rarity.COMMON, 0.40),
    (Rarity.UNCOMMON, 0.70),
    (Rarity.RARE, 0.87),
    (Rarity.EPIC, 0.96),
    (Rarity.LEGENDARY, 1.0),
]
RARITY_TABLE_EVERY_25 = [
    (Rarity.UNCOMMON, 0.20),
    (Rarity.RARE, 0.50),
    (Rarity.EPIC, 0.80),
    (Rarity.LEGENDARY, 1.0),
]


def should_award(event_kind) -> bool:
    """Whether an application event grants a loot box.

    Unknown events (including empty or non-string input) never qualify.
    """
    if not isinstance(event_kind, str):
        return False
    return event_kind in LOOT_BOX_EVENTS


def roll_one(catalog, rng=None) -> RewardItem:
    """Draw one item with probability ``weight / sum(weights)``.

    A single uniform draw walks the catalog in order (inverse CDF). If float
    drift leaves a positive remainder after the walk, the last item is
    returned. An empty catalog raises ``ValueError``.
    """
    rng = rng or random
    items = list(catalog)
    if not items:
        raise ValueError("Cannot roll from an empty catalog")

    total = sum(item.weight for item in items)
    remainder = rng.random() * total

    for item in items:
        remainder -= item.weight
        if remainder <= 0:
            return item

    return items[-1]


def generate_loot_box_contents(
    event_kind: str, catalog=STICKER_CATALOG, rng=None
) -> list[RewardItem]:
    """Roll the contents of a loot box for an event.

    Always one sticker; bonus-eligible events get an independent second roll
    with their own probability. Duplicates are allowed.
    """
    rng = rng or random
    stickers = [roll_one(catalog, rng)]

    bonus_chance = BONUS_CHANCES.get(event_kind, 0.0)
    if bonus_chance and rng.random() < bonus_chance:
        stickers.append(roll_one(catalog, rng))

    return stickers


def _pick(table, roll: float):
    for value, cumulative in table:
        if roll < cumulative:
            return value
    return table[-1][0]


def roll_box_size(level: int, rng=None) -> int:
    """Number of stickers in the box for reaching ``level``."""
    rng = rng or random
    if level % 25 == 0:
        table = BOX_SIZE_EVERY_25
    elif level % 10 == 0:
        table = BOX_SIZE_EVERY_10
    else:
        table = BOX_SIZE_REGULAR
    return _pick(table, rng.random())


def roll_rarity(level: int, rng=None) -> Rarity:
    """Rarity tier for one sticker of a level-up box; milestones get better odds."""
    rng = rng or random
    if level % 25 == 0:
        table = RARITY_TABLE_EVERY_25
    elif level % 10 == 0:
        table = RARITY_TABLE_EVERY_10
    else:
        table = RARITY_TABLE_REGULAR
    return _pick(table, rng.random())


def roll_level_up_box(level: int, catalog=STICKER_CATALOG, rng=None) -> list[RewardItem]:
    """Roll the sticker box granted for reaching ``level``.

    Each sticker first rolls a rarity tier, then a weighted draw within that
    tier. A tier with no catalog items falls back to the whole catalog.
    """
    rng = rng or random
    items = list(catalog)
    stickers = []
    for _ in range(roll_box_size(level, rng)):
        rarity = roll_rarity(level, rng)
        tier = [item for item in items if item.rarity == rarity]
        stickers.append(roll_one(tier or items, rng))
    return stickers


def roll_level_up_rewards(
    old_level: int, new_level: int, catalog=STICKER_CATALOG, rng=None
) -> list[RewardItem]:
    """One level-up box for every level crossed between old and new."""
    rng = rng or random
    stickers = []
    for level in range(old_level + 1, new_level + 1):
        stickers.extend(roll_level_up_box(level, catalog, rng))
    return stickers


def rarity_rank(rarity: Rarity) -> int:
    """Ordinal position of a rarity, 0 for common."""
    return RARITY_ORDER.index(rarity)
