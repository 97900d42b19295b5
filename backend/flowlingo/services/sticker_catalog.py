"""Animal sticker catalog.

The catalog is a static, immutable table built once at import time. Roll
functions receive it as a parameter; nothing mutates it at runtime.
"""

from dataclasses import dataclass
from enum import Enum


class Rarity(str, Enum):
    """Sticker rarity tiers, most to least frequent."""

    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


RARITY_ORDER = [
    Rarity.COMMON,
    Rarity.UNCOMMON,
    Rarity.RARE,
    Rarity.EPIC,
    Rarity.LEGENDARY,
]

RARITY_COLORS = {
    Rarity.COMMON: "#6B7280",  # Gray
    Rarity.UNCOMMON: "#10B981",  # Green
    Rarity.RARE: "#3B82F6",  # Blue
    Rarity.EPIC: "#A855F7",  # Purple
    Rarity.LEGENDARY: "#F59E0B",  # Gold
}


@dataclass(frozen=True)
class RewardItem:
    """A droppable sticker.

    ``weight`` is a relative draw likelihood; weights do not need to sum to
    100 because rolls normalize by the catalog total.
    """

    id: str
    name: str
    emoji: str
    rarity: Rarity
    weight: float
    description: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "emoji": self.emoji,
            "rarity": self.rarity.value,
            "probability": self.weight,
            "color": RARITY_COLORS[self.rarity],
            "description": self.description,
        }


def validate_catalog(items) -> tuple[RewardItem, ...]:
    """Freeze and check a catalog: non-empty, unique ids, positive weights."""
    catalog = tuple(items)
    if not catalog:
        raise ValueError("Sticker catalog must not be empty")

    seen = set()
    for item in catalog:
        if item.id in seen:
            raise ValueError(f"Duplicate sticker id: {item.id}")
        seen.add(item.id)
        if not item.weight > 0:
            raise ValueError(f"Sticker {item.id} must have a positive weight")
        if not isinstance(item.rarity, Rarity):
            raise ValueError(f"Sticker {item.id} has unknown rarity {item.rarity!r}")
    return catalog


STICKER_CATALOG = validate_catalog(
    [
        # Common (60% total)
        RewardItem("dog", "Loyal Dog", "🐕", Rarity.COMMON, 15,
                   "A faithful companion on your learning journey"),
        RewardItem("cat", "Curious Cat", "🐈", Rarity.COMMON, 15,
                   "Always curious and ready to explore"),
        RewardItem("bird", "Free Bird", "🐦", Rarity.COMMON, 10,
                   "Soaring high with knowledge"),
        RewardItem("fish", "Swimming Fish", "🐟", Rarity.COMMON, 10,
                   "Going with the flow of learning"),
        RewardItem("turtle", "Wise Turtle", "🐢", Rarity.COMMON, 10,
                   "Slow and steady wins the race"),
        # Uncommon (25% total)
        RewardItem("rabbit", "Quick Rabbit", "🐰", Rarity.UNCOMMON, 8,
                   "Hopping through lessons with speed"),
        RewardItem("fox", "Clever Fox", "🦊", Rarity.UNCOMMON, 7,
                   "Smart and witty problem solver"),
        RewardItem("owl", "Night Owl", "🦉", Rarity.UNCOMMON, 5,
                   "Studying late into the night"),
        RewardItem("butterfly", "Graceful Butterfly", "🦋", Rarity.UNCOMMON, 5,
                   "Transforming through learning"),
        # Rare (10% total)
        RewardItem("panda", "Peaceful Panda", "🐼", Rarity.RARE, 4,
                   "A symbol of China and harmony"),
        RewardItem("koala", "Cuddly Koala", "🐨", Rarity.RARE, 3,
                   "Taking it easy but learning lots"),
        RewardItem("penguin", "Cool Penguin", "🐧", Rarity.RARE, 3,
                   "Staying cool under pressure"),
        # Epic (4% total)
        RewardItem("unicorn", "Magical Unicorn", "🦄", Rarity.EPIC, 2,
                   "Making the impossible possible"),
        RewardItem("dragon", "Mighty Dragon", "🐲", Rarity.EPIC, 2,
                   "Master of Chinese culture"),
        # Legendary (1% total)
        RewardItem("phoenix", "Phoenix", "🔥🦅", Rarity.LEGENDARY, 0.5,
                   "Rising from challenges stronger than ever"),
        RewardItem("golden_dragon", "Golden Dragon", "🐉", Rarity.LEGENDARY, 0.5,
                   "The ultimate Chinese learning master"),
    ]
)

# Default mascot every learner owns; never dropped from loot boxes
DEFAULT_MASCOT_ID = "dolphin"
DEFAULT_MASCOT_EMOJI = "🐬"

_CATALOG_INDEX = {item.id: item for item in STICKER_CATALOG}


def get_sticker(sticker_id: str, catalog=STICKER_CATALOG) -> RewardItem | None:
    """Look up a sticker by id."""
    if catalog is STICKER_CATALOG:
        return _CATALOG_INDEX.get(sticker_id)
    return next((item for item in catalog if item.id == sticker_id), None)


def mascot_emoji(sticker_id: str) -> str:
    """Emoji shown for an equipped mascot sticker."""
    sticker = get_sticker(sticker_id)
    return sticker.emoji if sticker else DEFAULT_MASCOT_EMOJI
