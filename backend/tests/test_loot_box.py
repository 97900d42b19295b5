"""Tests for loot box rolls and the event allow-list."""

import random
from collections import Counter

import pytest

from flowlingo.services.loot_box import (LOOT_BOX_EVENTS, generate_loot_box_contents,
                                         roll_box_size, roll_level_up_box,
                                         roll_level_up_rewards, roll_one,
                                         roll_rarity, should_award)
from flowlingo.services.sticker_catalog import (STICKER_CATALOG, Rarity,
                                                RewardItem)


def item(item_id, weight, rarity=Rarity.COMMON):
    return RewardItem(item_id, item_id.title(), "⭐", rarity, weight, "")


class FixedRandom:
    """Returns the same draw every time."""

    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


class TestShouldAward:
    """Test cases for the event qualifier."""

    @pytest.mark.parametrize("event", sorted(LOOT_BOX_EVENTS))
    def test_allow_listed_events_qualify(self, event):
        assert should_award(event) is True

    def test_level_complete(self):
        assert should_award("level_complete") is True

    @pytest.mark.parametrize(
        "event",
        ["random_typo_event", "", "LEVEL_COMPLETE", " level_complete", "manual_open"],
    )
    def test_unknown_events_do_not_qualify(self, event):
        assert should_award(event) is False

    @pytest.mark.parametrize("event", [None, 42, ["level_complete"], {"a": 1}])
    def test_non_string_input(self, event):
        assert should_award(event) is False


class TestRollOne:
    """Test cases for the weighted draw."""

    def test_empty_catalog_raises(self):
        with pytest.raises(ValueError):
            roll_one([])

    def test_result_is_from_catalog(self):
        rng = random.Random(7)
        ids = {i.id for i in STICKER_CATALOG}
        for _ in range(2000):
            assert roll_one(STICKER_CATALOG, rng).id in ids

    def test_ninety_ten_split(self):
        catalog = [item("a", 90), item("b", 10)]
        rng = random.Random(1234)

        counts = Counter(roll_one(catalog, rng).id for _ in range(10_000))

        assert 8800 <= counts["a"] <= 9200
        assert 800 <= counts["b"] <= 1200

    def test_frequencies_match_weights(self):
        rng = random.Random(2024)
        samples = 100_000
        counts = Counter(roll_one(STICKER_CATALOG, rng).id for _ in range(samples))

        total_weight = sum(i.weight for i in STICKER_CATALOG)
        for sticker in STICKER_CATALOG:
            expected = sticker.weight / total_weight
            observed = counts[sticker.id] / samples
            assert abs(observed - expected) < 0.01, sticker.id

    def test_walk_is_ordered(self):
        catalog = [item("a", 1), item("b", 1), item("c", 2)]
        assert roll_one(catalog, FixedRandom(0.0)).id == "a"
        assert roll_one(catalog, FixedRandom(0.3)).id == "b"
        assert roll_one(catalog, FixedRandom(0.6)).id == "c"

    def test_drift_falls_back_to_last_item(self):
        catalog = [item("a", 0.1), item("b", 0.2), item("c", 0.3)]
        assert roll_one(catalog, FixedRandom(1.0)).id == "c"
        assert roll_one(catalog, FixedRandom(0.9999999999)).id == "c"

    def test_weights_need_not_sum_to_100(self):
        catalog = [item("a", 0.5), item("b", 0.5)]
        rng = random.Random(5)
        counts = Counter(roll_one(catalog, rng).id for _ in range(10_000))
        assert 4700 <= counts["a"] <= 5300


class TestGenerateLootBoxContents:
    """Test cases for assembling a loot box."""

    def test_always_at_least_one_item(self):
        rng = random.Random(3)
        for event in ["level_complete", "perfect_score", "manual_open", "nope"]:
            for _ in range(500):
                assert len(generate_loot_box_contents(event, rng=rng)) >= 1

    def test_events_without_bonus_give_one_item(self):
        rng = random.Random(11)
        for _ in range(1000):
            assert len(generate_loot_box_contents("level_complete", rng=rng)) == 1

    def test_perfect_score_bonus_rate(self):
        rng = random.Random(99)
        trials = 10_000
        doubles = sum(
            len(generate_loot_box_contents("perfect_score", rng=rng)) == 2
            for _ in range(trials)
        )
        assert 0.47 <= doubles / trials <= 0.53

    def test_assessment_bonus_rate(self):
        rng = random.Random(100)
        trials = 10_000
        doubles = sum(
            len(generate_loot_box_contents("assessment_complete", rng=rng)) == 2
            for _ in range(trials)
        )
        assert 0.27 <= doubles / trials <= 0.33

    def test_bonus_can_duplicate_first_item(self):
        catalog = [item("only", 1)]
        stickers = generate_loot_box_contents("perfect_score", catalog, FixedRandom(0.1))
        assert [s.id for s in stickers] == ["only", "only"]


class TestLevelUpBoxes:
    """Test cases for level-up sticker boxes."""

    def test_regular_box_size(self):
        rng = random.Random(8)
        sizes = {roll_box_size(3, rng) for _ in range(1000)}
        assert sizes == {1, 2, 3}

    def test_every_25_levels_gives_at_least_two(self):
        rng = random.Random(8)
        sizes = {roll_box_size(25, rng) for _ in range(1000)}
        assert min(sizes) == 2
        assert max(sizes) == 4

    def test_every_25_levels_has_no_commons(self):
        rng = random.Random(21)
        assert all(roll_rarity(50, rng) != Rarity.COMMON for _ in range(2000))

    def test_box_respects_rolled_rarity(self):
        # 0.995 lands on three stickers, all legendary, in the regular tables
        stickers = roll_level_up_box(2, STICKER_CATALOG, FixedRandom(0.995))
        assert stickers
        assert all(s.rarity == Rarity.LEGENDARY for s in stickers)

    def test_missing_tier_falls_back_to_whole_catalog(self):
        catalog = [item("a", 1), item("b", 1)]
        stickers = roll_level_up_box(25, catalog, random.Random(4))
        assert len(stickers) >= 2
        assert {s.id for s in stickers} <= {"a", "b"}

    def test_one_box_per_level_crossed(self):
        stickers = roll_level_up_rewards(1, 4, STICKER_CATALOG, FixedRandom(0.0))
        # Smallest box is one sticker, three levels crossed
        assert len(stickers) == 3

    def test_no_levels_crossed(self):
        assert roll_level_up_rewards(5, 5) == []
