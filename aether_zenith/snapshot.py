"""Read-only view of a simulation state for the presentation layer."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .components import (
    Color,
    Enemy,
    Footprint,
    Health,
    Particle,
    Position,
    PowerUp,
    Projectile,
    Sprite,
    Star,
)
from .context import SimulationState


@dataclass
class EntityView:
    kind: str
    x: float
    y: float
    width: float
    height: float
    color: Color
    health_ratio: float = 1.0


@dataclass
class ParticleView:
    x: float
    y: float
    radius: float
    color: Color
    alpha: float


@dataclass
class StarView:
    x: float
    y: float
    size: float
    alpha: float


@dataclass
class Snapshot:
    status: str
    score: int
    level: int
    credits: float
    health: float = 0.0
    max_health: float = 0.0
    health_ratio: float = 0.0
    weapon: str = "basic"
    shield: bool = False
    blink: bool = False
    shake_offset: Tuple[float, float] = (0.0, 0.0)
    player: Optional[EntityView] = None
    enemies: List[EntityView] = field(default_factory=list)
    projectiles: List[EntityView] = field(default_factory=list)
    power_ups: List[EntityView] = field(default_factory=list)
    particles: List[ParticleView] = field(default_factory=list)
    stars: List[StarView] = field(default_factory=list)


def _ratio(health: Health) -> float:
    return max(0.0, min(1.0, health.current / max(1e-9, health.max_hp)))


def take_snapshot(state: SimulationState, status: str, rng: Optional[random.Random] = None) -> Snapshot:
    rng = rng or random.Random()
    world = state.world
    prog = state.progression
    snap = Snapshot(status=status, score=prog.score, level=prog.level, credits=prog.credits)

    if state.player is not None:
        pos, box, player, health = state.player_parts()
        sprite = world.component_for_entity(state.player, Sprite)
        snap.player = EntityView("player", pos.x, pos.y, box.width, box.height, sprite.color, _ratio(health))
        snap.health, snap.max_health = health.current, health.max_hp
        snap.health_ratio = _ratio(health)
        snap.weapon = player.weapon.value
        snap.shield = player.shield_active
        snap.blink = player.invulnerable and player.blink

    if state.shake.active:
        m = state.shake.magnitude
        snap.shake_offset = ((rng.random() - 0.5) * m, (rng.random() - 0.5) * m)

    for _, (pos, box, sprite, health, enemy) in sorted(world.get_components(Position, Footprint, Sprite, Health, Enemy)):
        snap.enemies.append(EntityView(enemy.kind.value, pos.x, pos.y, box.width, box.height, sprite.color, _ratio(health)))
    for _, (pos, box, sprite, proj) in sorted(world.get_components(Position, Footprint, Sprite, Projectile)):
        snap.projectiles.append(EntityView(proj.owner.value, pos.x, pos.y, box.width, box.height, sprite.color))
    for _, (pos, box, sprite, pu) in sorted(world.get_components(Position, Footprint, Sprite, PowerUp)):
        snap.power_ups.append(EntityView(pu.kind.value, pos.x, pos.y, box.width, box.height, sprite.color))
    for _, (pos, sprite, part) in sorted(world.get_components(Position, Sprite, Particle)):
        snap.particles.append(ParticleView(pos.x, pos.y, part.radius, sprite.color, part.alpha))
    for _, (pos, star) in sorted(world.get_components(Position, Star)):
        snap.stars.append(StarView(pos.x, pos.y, star.size, star.alpha))
    return snap
