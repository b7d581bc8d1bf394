import random

import pytest

from aether_zenith.components import (
    Enemy,
    EnemyKind,
    Footprint,
    Health,
    Position,
    Sprite,
    Velocity,
)
from aether_zenith.config import default_settings
from aether_zenith.content import Content
from aether_zenith.meta import ProfileStore
from aether_zenith.session import Session
from aether_zenith.simulation import new_state


@pytest.fixture
def settings():
    s = default_settings()
    # thruster particles on every tick only add noise to entity counts
    s.effects.thrusters = False
    return s


@pytest.fixture
def content(tmp_path):
    # empty directory: built-in archetypes and upgrade ladders
    return Content(tmp_path)


@pytest.fixture
def store(tmp_path):
    return ProfileStore(tmp_path / "save" / "profile.json")


@pytest.fixture
def state(settings, content, store):
    return new_state(settings, content, store, rng=random.Random(7), with_stars=False)


@pytest.fixture
def session(settings, content, store):
    return Session(settings, content, store, rng=random.Random(11))


def add_enemy(state, x, y, hp=10, kind=EnemyKind.BASIC, score=10, size=40):
    """Place an enemy directly, bypassing the spawner's random placement."""
    return state.world.create_entity(
        Position(x, y),
        Velocity(0.0, 90.0),
        Footprint(size, size),
        Sprite((255, 0, 127)),
        Health(current=hp, max_hp=hp),
        Enemy(kind=kind, speed=90.0, score_value=score, fire_cooldown=99.0, fire_timer=99.0),
    )
