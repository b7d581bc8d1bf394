"""Behavior rules for the player ship and the enemy variants.

Enemies share one ``Enemy`` component; the variant lives in ``Enemy.kind``
and ``ENEMY_BEHAVIORS`` maps each kind to its per-tick rule.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, List, NamedTuple

from .components import (
    Enemy,
    EnemyKind,
    Footprint,
    Health,
    Owner,
    Player,
    Position,
    ScheduledRevert,
    Velocity,
    Weapon,
)
from .config import Settings
from .context import SimulationState
from .factories import create_projectile


class DamageOutcome(str, Enum):
    SHIELDED = "shielded"
    BLOCKED = "blocked"
    HIT = "hit"


class Shot(NamedTuple):
    x: float
    y: float
    width: float
    height: float
    vx: float
    vy: float
    damage: int


def take_damage(player: Player, health: Health, amount: float, invulnerability: float) -> DamageOutcome:
    if player.shield_active:
        player.shield_active = False
        return DamageOutcome.SHIELDED
    if player.invulnerable:
        return DamageOutcome.BLOCKED
    health.current = max(0.0, health.current - amount)
    player.invulnerable = True
    player.invulnerable_timer = invulnerability
    return DamageOutcome.HIT


def apply_damage(state: SimulationState, amount: float) -> DamageOutcome:
    """take_damage on the session's player plus the matching notification."""
    _, _, player, health = state.player_parts()
    outcome = take_damage(player, health, amount, state.settings.player.invulnerability)
    if outcome is DamageOutcome.SHIELDED:
        state.notify("shield_depleted", "Shield Depleted!")
    elif outcome is DamageOutcome.HIT:
        state.notify("hit", "Hit!")
    return outcome


def activate_power_up(player: Player, weapon: Weapon, now: float, duration: float = 8.0) -> None:
    player.weapon = weapon
    player.pending_reverts.append(ScheduledRevert(fires_at=now + duration, expected=weapon))


def fire_due_reverts(player: Player, now: float) -> bool:
    """Pop reverts that are due. Returns True if the weapon went back to basic."""
    reverted = False
    keep: List[ScheduledRevert] = []
    for rv in player.pending_reverts:
        if rv.fires_at > now:
            keep.append(rv)
        elif player.weapon is rv.expected and player.weapon is not Weapon.BASIC:
            player.weapon = Weapon.BASIC
            reverted = True
    player.pending_reverts = keep
    return reverted


def tick_invulnerability(player: Player, dt: float) -> None:
    if not player.invulnerable:
        return
    player.invulnerable_timer -= dt
    player.blink = int(player.invulnerable_timer / 0.1) % 2 == 0
    if player.invulnerable_timer <= 0:
        player.invulnerable = False
        player.invulnerable_timer = 0.0
        player.blink = False


def player_shots(pos: Position, box: Footprint, weapon: Weapon, settings: Settings) -> List[Shot]:
    wc = settings.weapons
    cx = pos.x + box.width / 2
    speed, damage = wc.laser_speed, wc.laser_damage
    center = Shot(cx - 2, pos.y, 4, 15, 0.0, -speed, damage)
    if weapon is Weapon.SPREAD:
        return [
            center,
            Shot(cx - 15, pos.y + 10, 4, 15, -wc.spread_drift, -speed * 0.9, damage),
            Shot(cx + 10, pos.y + 10, 4, 15, wc.spread_drift, -speed * 0.9, damage),
        ]
    if weapon is Weapon.HEAVY:
        return [Shot(cx - 5, pos.y - 10, 10, 30, 0.0, -speed * 0.7, damage * 2)]
    return [center]


def fire_player_weapon(state: SimulationState, pos: Position, box: Footprint, player: Player) -> int:
    shots = player_shots(pos, box, player.weapon, state.settings)
    for s in shots:
        create_projectile(state.world, s.x, s.y, s.width, s.height, s.vx, s.vy, s.damage, Owner.PLAYER)
    player.last_shot_at = state.clock
    return len(shots)


def reroll_fire_cooldown(enemy: Enemy, state: SimulationState) -> None:
    level = state.progression.level
    enemy.fire_cooldown = max(0.5, 1.0 + state.rng.random() * (2.0 - level * 0.05))
    enemy.fire_timer = enemy.fire_cooldown


def _try_fire(state: SimulationState, pos: Position, box: Footprint, enemy: Enemy, dt: float) -> bool:
    enemy.fire_timer -= dt
    if enemy.fire_timer > 0 or pos.y >= state.height - box.height:
        return False
    ec = state.settings.enemy
    create_projectile(
        state.world, pos.x + box.width / 2 - 2, pos.y + box.height, 4, 15,
        0.0, ec.laser_speed, ec.laser_damage, Owner.ENEMY,
    )
    reroll_fire_cooldown(enemy, state)
    return True


def _advance_basic(state: SimulationState, pos: Position, box: Footprint, vel: Velocity, enemy: Enemy, dt: float) -> None:
    vel.y = enemy.speed
    _try_fire(state, pos, box, enemy, dt)


def _advance_charger(state: SimulationState, pos: Position, box: Footprint, vel: Velocity, enemy: Enemy, dt: float) -> None:
    if not enemy.charging and state.player is not None and pos.y > state.height / 4:
        ppos, pbox, _, _ = state.player_parts()
        offset = abs((pos.x + box.width / 2) - (ppos.x + pbox.width / 2))
        if offset < state.settings.enemy.charge_align_threshold:
            enemy.charge_timer += dt
            if enemy.charge_timer > enemy.charge_delay:
                enemy.charging = True
                enemy.charge_timer = 0.0
    vel.y = enemy.charge_speed if enemy.charging else enemy.speed


EnemyBehavior = Callable[[SimulationState, Position, Footprint, Velocity, Enemy, float], None]

# shooters differ from basics only in their archetype's cooldown range
ENEMY_BEHAVIORS: Dict[EnemyKind, EnemyBehavior] = {
    EnemyKind.BASIC: _advance_basic,
    EnemyKind.CHARGER: _advance_charger,
    EnemyKind.SHOOTER: _advance_basic,
}
