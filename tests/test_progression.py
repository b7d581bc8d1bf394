import pytest

from aether_zenith.progression import (
    Progression,
    UpgradeSet,
    check_level_up,
    player_stats,
    purchase_upgrade,
)


@pytest.fixture
def progression(content):
    return Progression(upgrades=UpgradeSet.from_content(content))


def test_award_adds_score_and_credits(progression):
    progression.award(250, 0.1)
    assert progression.score == 250
    assert progression.credits == pytest.approx(25.0)
    progression.award(0, 0.1)
    assert progression.score == 250


def test_level_up_threshold(progression):
    progression.score = 999
    assert not check_level_up(progression, 1000)
    progression.award(1, 0.1)
    assert check_level_up(progression, 1000)
    assert progression.level == 2
    # next threshold is level * 1000
    assert not check_level_up(progression, 1000)


def test_purchase_needs_credits(progression):
    result = purchase_upgrade(progression, "hull")
    assert not result.ok
    assert result.reason == "insufficient_credits"
    assert result.cost == 500
    assert progression.upgrades["hull"].level == 1


def test_purchase_spends_credits(progression):
    progression.credits = 600
    result = purchase_upgrade(progression, "hull")
    assert result.ok
    assert result.level == 2
    assert progression.credits == 100
    assert progression.upgrades["hull"].next_cost == 1000


def test_purchase_at_max_level(content):
    progression = Progression(
        upgrades=UpgradeSet.from_content(content, {"engine": 5}),
        credits=1_000_000,
    )
    result = purchase_upgrade(progression, "engine")
    assert not result.ok
    assert result.reason == "max_level"
    assert progression.credits == 1_000_000


def test_purchase_unknown_category(progression):
    assert purchase_upgrade(progression, "warp").reason == "unknown_category"


def test_saved_levels_are_clamped(content):
    upgrades = UpgradeSet.from_content(content, {"hull": 9, "engine": 0})
    assert upgrades.levels() == {"hull": 5, "engine": 1, "weapon": 1}
    assert upgrades["hull"].maxed
    assert upgrades["hull"].next_cost is None


def test_player_stats_follow_upgrades(settings, content):
    upgrades = UpgradeSet.from_content(content, {"hull": 3, "engine": 2, "weapon": 5})
    stats = player_stats(settings, upgrades)
    assert stats.max_health == 140
    assert stats.speed == 330
    assert stats.fire_cooldown == pytest.approx(0.12)
