from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

Color = tuple[int, int, int]


class Owner(str, Enum):
    PLAYER = "player"
    ENEMY = "enemy"


class Weapon(str, Enum):
    BASIC = "basic"
    SPREAD = "spread"
    HEAVY = "heavy"


class EnemyKind(str, Enum):
    BASIC = "basic"
    CHARGER = "charger"
    SHOOTER = "shooter"


class PowerUpKind(str, Enum):
    SPREAD_SHOT = "spread_shot"
    HEAVY_LASER = "heavy_laser"
    SHIELD = "shield"
    HEALTH_PACK = "health_pack"


@dataclass
class Position:
    x: float
    y: float


@dataclass
class Velocity:
    x: float = 0.0
    y: float = 0.0


@dataclass
class Footprint:
    width: float
    height: float


@dataclass
class Sprite:
    color: Color


@dataclass
class Health:
    current: float
    max_hp: float


@dataclass
class ScheduledRevert:
    fires_at: float
    expected: Weapon


@dataclass
class Player:
    speed: float
    fire_cooldown: float
    weapon: Weapon = Weapon.BASIC
    invulnerable: bool = False
    invulnerable_timer: float = 0.0
    blink: bool = False
    shield_active: bool = False
    last_shot_at: float = 0.0
    pending_reverts: List[ScheduledRevert] = field(default_factory=list)


@dataclass
class Projectile:
    damage: int
    owner: Owner


@dataclass
class Enemy:
    kind: EnemyKind
    speed: float
    score_value: int
    fire_cooldown: float = 0.0
    fire_timer: float = 0.0  # seconds until the next shot
    charging: bool = False
    charge_timer: float = 0.0
    charge_delay: float = 0.0
    charge_speed: float = 0.0


@dataclass
class PowerUp:
    kind: PowerUpKind


@dataclass
class Particle:
    radius: float
    lifespan: float
    start_alpha: float = 1.0
    alpha: float = 1.0
    age: float = 0.0
    gravity: float = 0.0

    @property
    def expired(self) -> bool:
        return self.age >= self.lifespan or self.alpha <= 0


@dataclass
class Star:
    size: float
    speed: float
    alpha: float
