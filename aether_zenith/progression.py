"""Score, level and the persistent upgrade ladders."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .config import Settings
from .content import Content

CATEGORIES = ("hull", "engine", "weapon")


@dataclass
class UpgradeTrack:
    level: int = 1
    max_level: int = 5
    costs: List[int] = field(default_factory=list)
    bonus: float = 0.0

    @property
    def maxed(self) -> bool:
        return self.level >= self.max_level

    @property
    def next_cost(self) -> Optional[int]:
        if self.maxed or self.level - 1 >= len(self.costs):
            return None
        return self.costs[self.level - 1]


@dataclass
class UpgradeSet:
    tracks: Dict[str, UpgradeTrack]

    @classmethod
    def from_content(cls, content: Content, levels: Optional[Dict[str, int]] = None) -> "UpgradeSet":
        levels = levels or {}
        tracks: Dict[str, UpgradeTrack] = {}
        for key in CATEGORIES:
            data = content.upgrade(key)
            max_level = int(data.get("max_level", 5))
            level = int(levels.get(key, 1))
            tracks[key] = UpgradeTrack(
                level=max(1, min(max_level, level)),
                max_level=max_level,
                costs=[int(c) for c in data.get("costs", [])],
                bonus=float(data.get("bonus", 0.0)),
            )
        return cls(tracks)

    def __getitem__(self, key: str) -> UpgradeTrack:
        return self.tracks[key]

    def levels(self) -> Dict[str, int]:
        return {k: t.level for k, t in self.tracks.items()}


@dataclass
class Progression:
    upgrades: UpgradeSet
    credits: float = 0.0
    score: int = 0
    level: int = 1

    def award(self, points: int, credit_rate: float) -> None:
        if points <= 0:
            return
        self.score += int(points)
        self.credits += points * credit_rate


@dataclass
class PlayerStats:
    speed: float
    max_health: float
    fire_cooldown: float


@dataclass
class PurchaseResult:
    ok: bool
    category: str
    reason: str = ""
    cost: int = 0
    level: int = 0


def player_stats(settings: Settings, upgrades: UpgradeSet) -> PlayerStats:
    hull, engine, weapon = upgrades["hull"], upgrades["engine"], upgrades["weapon"]
    return PlayerStats(
        speed=settings.player.base_speed + (engine.level - 1) * engine.bonus,
        max_health=settings.player.base_max_health + (hull.level - 1) * hull.bonus,
        fire_cooldown=max(0.0, settings.weapons.base_cooldown - (weapon.level - 1) * weapon.bonus),
    )


def check_level_up(progression: Progression, threshold: int) -> bool:
    """Advance at most one level per call."""
    if progression.score >= progression.level * threshold:
        progression.level += 1
        return True
    return False


def purchase_upgrade(progression: Progression, category: str) -> PurchaseResult:
    track = progression.upgrades.tracks.get(category)
    if track is None:
        return PurchaseResult(False, category, reason="unknown_category")
    if track.maxed:
        return PurchaseResult(False, category, reason="max_level", level=track.level)
    cost = track.next_cost
    if cost is None:
        return PurchaseResult(False, category, reason="max_level", level=track.level)
    if progression.credits < cost:
        return PurchaseResult(False, category, reason="insufficient_credits", cost=cost, level=track.level)
    progression.credits -= cost
    track.level += 1
    return PurchaseResult(True, category, cost=cost, level=track.level)
