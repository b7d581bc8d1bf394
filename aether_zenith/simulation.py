from __future__ import annotations

import random
from typing import Optional

import esper

from .collision import CollisionSystem
from .config import Settings
from .content import Content
from .context import SimulationState
from .factories import create_player, generate_stars
from .meta import ProfileStore
from .progression import Progression, UpgradeSet, player_stats
from .systems import (
    EnemyAISystem,
    LevelUpSystem,
    MovementSystem,
    ParticleSystem,
    PlayerSystem,
    PruneSystem,
    ScreenShakeSystem,
    SpawnSystem,
    StarfieldSystem,
)


def install_systems(state: SimulationState) -> None:
    world = state.world
    world.add_processor(PlayerSystem(state), priority=100)
    world.add_processor(EnemyAISystem(state), priority=90)
    world.add_processor(SpawnSystem(state), priority=85)
    world.add_processor(MovementSystem(state), priority=80)
    world.add_processor(ParticleSystem(state), priority=75)
    world.add_processor(StarfieldSystem(state), priority=70)
    world.add_processor(CollisionSystem(state), priority=60)
    world.add_processor(PruneSystem(state), priority=50)
    world.add_processor(LevelUpSystem(state), priority=45)
    world.add_processor(ScreenShakeSystem(state), priority=40)


def new_state(
    settings: Settings,
    content: Content,
    store: ProfileStore,
    upgrades: Optional[UpgradeSet] = None,
    rng: Optional[random.Random] = None,
    with_player: bool = True,
    with_stars: bool = True,
) -> SimulationState:
    """Fresh world for one play session, with upgrade-derived player stats baked in."""
    if upgrades is None:
        upgrades = UpgradeSet.from_content(content, store.load_upgrades())
    progression = Progression(upgrades=upgrades, credits=store.get_credits())
    state = SimulationState(
        world=esper.World(),
        settings=settings,
        content=content,
        progression=progression,
        store=store,
        rng=rng or random.Random(settings.simulation.seed),
    )
    if with_player:
        state.player = create_player(state.world, settings, player_stats(settings, upgrades))
    if with_stars:
        generate_stars(state.world, settings, state.rng)
    install_systems(state)
    return state


def tick(state: SimulationState, dt: float) -> SimulationState:
    """Advance one step. A finished run is returned unchanged."""
    if state.game_over:
        return state
    state.clock += dt
    state.world.process(dt)
    return state
