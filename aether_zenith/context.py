from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

import esper

from .components import Footprint, Health, Player, Position
from .config import Settings
from .content import Content
from .meta import ProfileStore
from .progression import Progression

NOTIFICATION_DURATIONS = {
    "level_up": 1.5,
    "power_up": 1.2,
    "weapon_reverted": 1.2,
    "shield_activated": 1.2,
    "shield_depleted": 1.2,
    "health_restored": 1.2,
    "upgrade_rejected": 1.2,
    "hit": 0.3,
}


@dataclass
class InputState:
    held: Set[str] = field(default_factory=set)

    def is_held(self, name: str) -> bool:
        return name in self.held


@dataclass
class Notification:
    kind: str
    message: str
    duration: float


@dataclass
class ScreenShake:
    magnitude: float = 0.0
    remaining: float = 0.0

    def initiate(self, magnitude: float, duration: float) -> None:
        self.magnitude = magnitude
        self.remaining = duration

    @property
    def active(self) -> bool:
        return self.remaining > 0


@dataclass
class SimulationState:
    world: esper.World
    settings: Settings
    content: Content
    progression: Progression
    store: ProfileStore
    rng: random.Random = field(default_factory=random.Random)
    input: InputState = field(default_factory=InputState)
    clock: float = 0.0
    player: Optional[int] = None
    shake: ScreenShake = field(default_factory=ScreenShake)
    notifications: List[Notification] = field(default_factory=list)
    game_over: bool = False

    @property
    def width(self) -> int:
        return self.settings.window.width

    @property
    def height(self) -> int:
        return self.settings.window.height

    @property
    def running(self) -> bool:
        return not self.game_over

    def player_parts(self) -> Tuple[Position, Footprint, Player, Health]:
        w = self.world
        e = self.player
        return (
            w.component_for_entity(e, Position),
            w.component_for_entity(e, Footprint),
            w.component_for_entity(e, Player),
            w.component_for_entity(e, Health),
        )

    def notify(self, kind: str, message: str) -> None:
        self.notifications.append(Notification(kind, message, NOTIFICATION_DURATIONS.get(kind, 1.2)))

    def award(self, points: int) -> None:
        self.progression.award(points, self.settings.progression.credit_rate)
        self.store.save_credits(self.progression.credits)

    def check_game_over(self, health: Health) -> bool:
        if health.current <= 0:
            self.game_over = True
        return self.game_over
