from __future__ import annotations

from typing import Optional, Set

import esper

from .actors import (
    ENEMY_BEHAVIORS,
    apply_damage,
    fire_due_reverts,
    fire_player_weapon,
    tick_invulnerability,
)
from .collision import newest_first
from .components import (
    Enemy,
    EnemyKind,
    Footprint,
    Particle,
    Position,
    PowerUp,
    Projectile,
    Star,
    Velocity,
)
from .context import SimulationState
from .factories import create_enemy, spawn_thruster
from .log import get_logger
from .progression import check_level_up

logger = get_logger(__name__)

_ENEMY_KINDS = {k.value: k for k in EnemyKind}


class PlayerSystem(esper.Processor):
    def __init__(self, ctx: SimulationState) -> None:
        super().__init__()
        self.ctx = ctx

    def process(self, dt: float) -> None:
        ctx = self.ctx
        if not ctx.running or ctx.player is None:
            return
        pos, box, player, _health = ctx.player_parts()
        direction = 0
        if ctx.input.is_held("left"):
            direction -= 1
        if ctx.input.is_held("right"):
            direction += 1
        pos.x += direction * player.speed * dt
        pos.x = max(0.0, min(ctx.width - box.width, pos.x))

        if ctx.input.is_held("fire") and ctx.clock - player.last_shot_at > player.fire_cooldown:
            fire_player_weapon(ctx, pos, box, player)

        tick_invulnerability(player, dt)
        if fire_due_reverts(player, ctx.clock):
            ctx.notify("weapon_reverted", "Weapon Reverted!")

        if ctx.settings.effects.thrusters:
            spawn_thruster(self.world, ctx.rng, pos.x + box.width / 2, pos.y + box.height)


class EnemyAISystem(esper.Processor):
    def __init__(self, ctx: SimulationState) -> None:
        super().__init__()
        self.ctx = ctx

    def process(self, dt: float) -> None:
        if not self.ctx.running:
            return
        for _, (pos, box, vel, enemy) in newest_first(self.world.get_components(Position, Footprint, Velocity, Enemy)):
            ENEMY_BEHAVIORS[enemy.kind](self.ctx, pos, box, vel, enemy, dt)


class SpawnSystem(esper.Processor):
    def __init__(self, ctx: SimulationState) -> None:
        super().__init__()
        self.ctx = ctx
        self.last_spawn_at = ctx.clock

    @property
    def interval(self) -> float:
        sp = self.ctx.settings.spawning
        return max(sp.min_interval, sp.base_interval - sp.interval_step * self.ctx.progression.level)

    @property
    def cap(self) -> int:
        return self.ctx.settings.spawning.base_cap + self.ctx.progression.level

    def process(self, dt: float) -> None:
        if not self.ctx.running:
            return
        self.try_spawn(self.ctx.clock)

    def try_spawn(self, now: float) -> Optional[int]:
        """Create at most one enemy; the interval timer resets even when the cap blocks the spawn."""
        if now - self.last_spawn_at <= self.interval:
            return None
        self.last_spawn_at = now
        if len(self.world.get_component(Enemy)) >= self.cap:
            return None
        ctx = self.ctx
        level = ctx.progression.level
        kinds = [_ENEMY_KINDS[k] for k in ctx.content.unlocked_enemies(level) if k in _ENEMY_KINDS]
        if not kinds:
            return None
        kind = ctx.rng.choice(kinds)
        return create_enemy(self.world, ctx.settings, ctx.content, kind, level, ctx.rng)


class MovementSystem(esper.Processor):
    def __init__(self, ctx: SimulationState) -> None:
        super().__init__()
        self.ctx = ctx

    def process(self, dt: float) -> None:
        if not self.ctx.running:
            return
        for _, (p, v) in self.world.get_components(Position, Velocity):
            p.x += v.x * dt
            p.y += v.y * dt


class ParticleSystem(esper.Processor):
    def __init__(self, ctx: SimulationState) -> None:
        super().__init__()
        self.ctx = ctx

    def process(self, dt: float) -> None:
        if not self.ctx.running:
            return
        shrink = 0.98 ** (dt * 60)
        for _, (v, part) in self.world.get_components(Velocity, Particle):
            v.y += part.gravity * dt
            part.age += dt
            part.alpha = max(0.0, part.start_alpha * (1 - part.age / part.lifespan))
            part.radius *= shrink


class StarfieldSystem(esper.Processor):
    def __init__(self, ctx: SimulationState) -> None:
        super().__init__()
        self.ctx = ctx

    def process(self, dt: float) -> None:
        if not self.ctx.running:
            return
        for _, (pos, star) in self.world.get_components(Position, Star):
            pos.y += star.speed * dt
            if pos.y > self.ctx.height:
                pos.y = 0.0
                pos.x = self.ctx.rng.random() * self.ctx.width


def outside_playfield(pos: Position, box: Footprint, width: float, height: float) -> bool:
    return (
        pos.y < -box.height
        or pos.y > height + box.height
        or pos.x < -box.width
        or pos.x > width + box.width
    )


class PruneSystem(esper.Processor):
    def __init__(self, ctx: SimulationState) -> None:
        super().__init__()
        self.ctx = ctx

    def process(self, dt: float) -> None:
        if not self.ctx.running:
            return
        ctx = self.ctx
        w, h = ctx.width, ctx.height
        dead: Set[int] = set()
        for e, (pos, box, _proj) in self.world.get_components(Position, Footprint, Projectile):
            if outside_playfield(pos, box, w, h):
                dead.add(e)
        for e, (pos, box, _pu) in self.world.get_components(Position, Footprint, PowerUp):
            if outside_playfield(pos, box, w, h):
                dead.add(e)
        for e, part in self.world.get_component(Particle):
            if part.expired:
                dead.add(e)

        escaped = [e for e, (pos, _enemy) in newest_first(self.world.get_components(Position, Enemy)) if pos.y > h]
        for e in escaped:
            dead.add(e)
            if ctx.player is not None:
                apply_damage(ctx, ctx.settings.progression.escape_damage)
                ctx.check_game_over(ctx.player_parts()[3])

        for e in dead:
            self.world.delete_entity(e, immediate=True)


class LevelUpSystem(esper.Processor):
    def __init__(self, ctx: SimulationState) -> None:
        super().__init__()
        self.ctx = ctx

    def process(self, dt: float) -> None:
        ctx = self.ctx
        if not ctx.running:
            return
        if not check_level_up(ctx.progression, ctx.settings.progression.level_up_threshold):
            return
        if ctx.player is not None:
            health = ctx.player_parts()[3]
            health.current = health.max_hp
        ctx.notify("level_up", f"LEVEL {ctx.progression.level}!")
        logger.info("Level up: %d (score %d)", ctx.progression.level, ctx.progression.score)


class ScreenShakeSystem(esper.Processor):
    def __init__(self, ctx: SimulationState) -> None:
        super().__init__()
        self.ctx = ctx

    def process(self, dt: float) -> None:
        shake = self.ctx.shake
        if shake.remaining > 0:
            shake.remaining = max(0.0, shake.remaining - dt)
