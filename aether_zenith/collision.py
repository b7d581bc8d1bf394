from __future__ import annotations

from typing import Iterable, List, Set, Tuple, TypeVar

import esper

from .actors import activate_power_up, apply_damage
from .components import (
    Enemy,
    Footprint,
    Health,
    Owner,
    Player,
    Position,
    PowerUp,
    PowerUpKind,
    Projectile,
    Weapon,
)
from .context import SimulationState
from .factories import create_power_up, spawn_explosion, spawn_hit_spark
from .log import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

PICKUP_WEAPONS = {
    PowerUpKind.SPREAD_SHOT: Weapon.SPREAD,
    PowerUpKind.HEAVY_LASER: Weapon.HEAVY,
}


def overlaps(a: Position, a_box: Footprint, b: Position, b_box: Footprint) -> bool:
    return (
        a.x < b.x + b_box.width
        and a.x + a_box.width > b.x
        and a.y < b.y + b_box.height
        and a.y + a_box.height > b.y
    )


def newest_first(rows: Iterable[Tuple[int, T]]) -> List[Tuple[int, T]]:
    """Entity ids grow with creation, so this is the collection walked from its end."""
    return sorted(rows, key=lambda row: row[0], reverse=True)


def apply_pickup(state: SimulationState, player: Player, health: Health, kind: PowerUpKind) -> None:
    weapon = PICKUP_WEAPONS.get(kind)
    if weapon is not None:
        activate_power_up(player, weapon, state.clock, state.settings.weapons.power_up_duration)
        state.notify("power_up", f"{weapon.value.upper()} WEAPON!")
    elif kind is PowerUpKind.SHIELD:
        player.shield_active = True
        state.notify("shield_activated", "Shield Activated!")
    elif kind is PowerUpKind.HEALTH_PACK:
        health.current = min(health.max_hp, health.current + state.settings.powerups.heal_amount)
        state.notify("health_restored", "Health Restored!")


class CollisionSystem(esper.Processor):
    """Four all-pairs AABB sweeps per tick.

    Each sweep records removed entities in a local set and deletes them from
    the world once the sweep is done, so an entity removed earlier in a sweep
    is skipped for the rest of it.
    """

    def __init__(self, ctx: SimulationState) -> None:
        super().__init__()
        self.ctx = ctx

    def process(self, dt: float) -> None:
        if not self.ctx.running:
            return
        self.resolve()

    def resolve(self) -> None:
        self.player_fire_vs_enemies()
        if self.ctx.player is None:
            return
        self.enemy_fire_vs_player()
        self.enemies_vs_player()
        self.player_vs_power_ups()

    def _compact(self, dead: Set[int]) -> None:
        for e in dead:
            self.world.delete_entity(e, immediate=True)

    def _lasers(self, owner: Owner):
        return newest_first(
            (e, comps)
            for e, comps in self.world.get_components(Position, Footprint, Projectile)
            if comps[2].owner is owner
        )

    def _explode(self, pos: Position, box: Footprint) -> None:
        spawn_explosion(
            self.world, self.ctx.settings, self.ctx.rng,
            pos.x + box.width / 2, pos.y + box.height / 2, box.width,
        )

    def _shake(self, scale: float = 1.0) -> None:
        fx = self.ctx.settings.effects
        self.ctx.shake.initiate(fx.shake_magnitude * scale, fx.shake_duration * scale)

    def _destroy_enemy(self, pos: Position, box: Footprint, enemy: Enemy) -> None:
        ctx = self.ctx
        ctx.award(enemy.score_value)
        self._explode(pos, box)
        pu = ctx.settings.powerups
        chance = min(1.0, pu.base_drop_chance + pu.drop_chance_per_level * ctx.progression.level)
        if ctx.rng.random() < chance:
            kind = ctx.rng.choice(list(PowerUpKind))
            create_power_up(self.world, ctx.settings, kind, pos.x + box.width / 2, pos.y + box.height / 2)
        logger.debug("%s destroyed (+%d)", enemy.kind.value, enemy.score_value)

    def player_fire_vs_enemies(self) -> None:
        enemies = newest_first(self.world.get_components(Position, Footprint, Health, Enemy))
        dead_lasers: Set[int] = set()
        dead_enemies: Set[int] = set()
        for le, (lpos, lbox, proj) in self._lasers(Owner.PLAYER):
            for ee, (epos, ebox, ehealth, enemy) in enemies:
                if ee in dead_enemies or not overlaps(lpos, lbox, epos, ebox):
                    continue
                dead_lasers.add(le)
                ehealth.current -= proj.damage
                if ehealth.current <= 0:
                    self._destroy_enemy(epos, ebox, enemy)
                    dead_enemies.add(ee)
                else:
                    spawn_hit_spark(self.world, self.ctx.rng, lpos.x + lbox.width / 2, lpos.y)
                break
        self._compact(dead_lasers | dead_enemies)

    def enemy_fire_vs_player(self) -> None:
        ppos, pbox, _, health = self.ctx.player_parts()
        dead: Set[int] = set()
        for le, (lpos, lbox, proj) in self._lasers(Owner.ENEMY):
            if not overlaps(lpos, lbox, ppos, pbox):
                continue
            dead.add(le)
            apply_damage(self.ctx, proj.damage)
            self._shake()
            self.ctx.check_game_over(health)
        self._compact(dead)

    def enemies_vs_player(self) -> None:
        ctx = self.ctx
        ppos, pbox, _, health = ctx.player_parts()
        dead: Set[int] = set()
        for ee, (epos, ebox, enemy) in newest_first(self.world.get_components(Position, Footprint, Enemy)):
            if not overlaps(ppos, pbox, epos, ebox):
                continue
            apply_damage(ctx, ctx.settings.progression.ram_damage)
            # score is integral; odd values round down
            ctx.award(enemy.score_value // 2)
            self._explode(epos, ebox)
            self._shake(1.5)
            dead.add(ee)
            ctx.check_game_over(health)
        self._compact(dead)

    def player_vs_power_ups(self) -> None:
        ppos, pbox, player, health = self.ctx.player_parts()
        dead: Set[int] = set()
        for ue, (upos, ubox, pu) in newest_first(self.world.get_components(Position, Footprint, PowerUp)):
            if not overlaps(ppos, pbox, upos, ubox):
                continue
            apply_pickup(self.ctx, player, health, pu.kind)
            dead.add(ue)
        self._compact(dead)
