from __future__ import annotations

import math
import random
from typing import Sequence, Tuple

import esper

from .components import (
    Color,
    Enemy,
    EnemyKind,
    Footprint,
    Health,
    Owner,
    Particle,
    Player,
    Position,
    PowerUp,
    PowerUpKind,
    Projectile,
    Sprite,
    Star,
    Velocity,
)
from .config import Settings
from .content import Content
from .progression import PlayerStats

PLAYER_LASER_COLOR: Color = (255, 235, 59)
ENEMY_LASER_COLOR: Color = (255, 0, 127)
EXPLOSION_COLORS: Tuple[Color, ...] = ((255, 69, 0), (255, 165, 0), (255, 215, 0), (255, 255, 0))
SPARK_COLORS: Tuple[Color, ...] = ((255, 235, 59), (255, 165, 0))
THRUSTER_COLORS: Tuple[Color, ...] = ((0, 255, 255), (0, 153, 255))
POWER_UP_COLORS = {
    PowerUpKind.SPREAD_SHOT: (0, 255, 255),
    PowerUpKind.HEAVY_LASER: (255, 165, 0),
    PowerUpKind.SHIELD: (173, 216, 230),
    PowerUpKind.HEALTH_PACK: (0, 255, 0),
}

# per-frame source values scaled to seconds at 60 ticks/s
_FRAME = 60.0


def create_player(world: esper.World, settings: Settings, stats: PlayerStats) -> int:
    pc = settings.player
    x = (settings.window.width - pc.width) / 2
    y = settings.window.height - pc.height - pc.bottom_margin
    return world.create_entity(
        Position(x, y),
        Footprint(pc.width, pc.height),
        Sprite(pc.color),
        Health(current=stats.max_health, max_hp=stats.max_health),
        Player(speed=stats.speed, fire_cooldown=stats.fire_cooldown),
    )


def create_enemy(
    world: esper.World,
    settings: Settings,
    content: Content,
    kind: EnemyKind,
    level: int,
    rng: random.Random,
) -> int:
    data = content.enemy(kind.value)
    size = float(data.get("size", 40))
    x = rng.random() * (settings.window.width - size)
    speed = settings.enemy.base_speed * float(data.get("speed_mult", 1.0)) * (1 + (level - 1) * 0.05)
    health = settings.enemy.base_health * float(data.get("health_mult", 1.0)) * level
    enemy = Enemy(kind=kind, speed=speed, score_value=int(data.get("score", 10)) * level)
    if kind is EnemyKind.CHARGER:
        enemy.charge_speed = speed * 2
        enemy.charge_delay = float(data.get("charge_delay_min", 1.0)) + rng.random() * float(data.get("charge_delay_spread", 2.0))
    else:
        enemy.fire_cooldown = float(data.get("fire_cooldown_min", 1.5)) + rng.random() * float(data.get("fire_cooldown_spread", 2.0))
        # stagger the first shot
        enemy.fire_timer = enemy.fire_cooldown + rng.random() * enemy.fire_cooldown
    color = tuple(data.get("color", (255, 0, 127)))
    return world.create_entity(
        Position(x, -size),
        Velocity(0.0, speed),
        Footprint(size, size),
        Sprite(color),
        Health(current=health, max_hp=health),
        enemy,
    )


def create_projectile(
    world: esper.World,
    x: float,
    y: float,
    width: float,
    height: float,
    vx: float,
    vy: float,
    damage: int,
    owner: Owner,
) -> int:
    color = PLAYER_LASER_COLOR if owner is Owner.PLAYER else ENEMY_LASER_COLOR
    return world.create_entity(
        Position(x, y),
        Velocity(vx, vy),
        Footprint(width, height),
        Sprite(color),
        Projectile(damage=damage, owner=owner),
    )


def create_power_up(world: esper.World, settings: Settings, kind: PowerUpKind, cx: float, cy: float) -> int:
    size = settings.powerups.size
    return world.create_entity(
        Position(cx - size / 2, cy - size / 2),
        Velocity(0.0, settings.powerups.speed),
        Footprint(size, size),
        Sprite(POWER_UP_COLORS[kind]),
        PowerUp(kind),
    )


def create_particle(
    world: esper.World,
    rng: random.Random,
    x: float,
    y: float,
    radius_range: Tuple[float, float],
    colors: Sequence[Color],
    vx: float,
    vy: float,
    alpha: float,
    lifespan: float,
    gravity: float = 0.0,
) -> int:
    lo, hi = radius_range
    return world.create_entity(
        Position(x, y),
        Velocity(vx, vy),
        Sprite(rng.choice(list(colors))),
        Particle(radius=rng.uniform(lo, hi), lifespan=lifespan, start_alpha=alpha, alpha=alpha, gravity=gravity),
    )


def spawn_explosion(world: esper.World, settings: Settings, rng: random.Random, x: float, y: float, size: float) -> int:
    count = 20 + rng.randrange(10)
    for _ in range(count):
        angle = rng.random() * math.pi * 2
        speed = (rng.random() * (size / 10) + 1) * _FRAME
        create_particle(
            world, rng, x, y, (2, 6), EXPLOSION_COLORS,
            math.cos(angle) * speed, math.sin(angle) * speed,
            1.0, settings.effects.particle_lifespan, settings.effects.explosion_gravity,
        )
    return count


def spawn_hit_spark(world: esper.World, rng: random.Random, x: float, y: float) -> int:
    return create_particle(
        world, rng, x, y, (1, 3), SPARK_COLORS,
        (rng.random() - 0.5) * 2 * _FRAME, (rng.random() - 0.5) * 2 * _FRAME,
        1.0, 20 / _FRAME, 0.05 * _FRAME * _FRAME,
    )


def spawn_thruster(world: esper.World, rng: random.Random, x: float, y: float) -> int:
    return create_particle(
        world, rng, x, y, (3, 6), THRUSTER_COLORS,
        (rng.random() - 0.5) * _FRAME, (rng.random() * 2 + 2) * _FRAME,
        0.8, 40 / _FRAME,
    )


# (count, size range, speed range px/frame, alpha) per parallax layer
STAR_LAYERS = (
    (150, (0.5, 1.5), (0.2, 0.7), 0.4),
    (70, (1.0, 2.5), (0.5, 2.0), 0.7),
    (30, (1.5, 3.5), (1.0, 3.0), 0.9),
)


def generate_stars(world: esper.World, settings: Settings, rng: random.Random) -> int:
    w, h = settings.window.width, settings.window.height
    total = 0
    for count, (smin, smax), (vmin, vmax), alpha in STAR_LAYERS:
        for _ in range(count):
            world.create_entity(
                Position(rng.random() * w, rng.random() * h),
                Star(size=rng.uniform(smin, smax), speed=rng.uniform(vmin, vmax) * _FRAME, alpha=alpha),
            )
        total += count
    return total
