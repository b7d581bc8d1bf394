import pytest

from aether_zenith.actors import (
    ENEMY_BEHAVIORS,
    DamageOutcome,
    activate_power_up,
    fire_due_reverts,
    player_shots,
    take_damage,
    tick_invulnerability,
)
from aether_zenith.components import (
    Enemy,
    EnemyKind,
    Footprint,
    Health,
    Owner,
    Player,
    Position,
    Projectile,
    Velocity,
    Weapon,
)
from aether_zenith.config import default_settings


def _player():
    return Player(speed=300.0, fire_cooldown=0.2)


def test_shield_absorbs_one_hit():
    player, health = _player(), Health(100, 100)
    player.shield_active = True
    outcome = take_damage(player, health, 30, 1.5)
    assert outcome is DamageOutcome.SHIELDED
    assert health.current == 100
    assert player.shield_active is False
    assert player.invulnerable is False


def test_invulnerable_player_takes_no_damage():
    player, health = _player(), Health(100, 100)
    assert take_damage(player, health, 10, 1.5) is DamageOutcome.HIT
    assert health.current == 90
    assert player.invulnerable and player.invulnerable_timer == 1.5
    assert take_damage(player, health, 10, 1.5) is DamageOutcome.BLOCKED
    assert health.current == 90


def test_damage_clamps_at_zero():
    player, health = _player(), Health(5, 100)
    take_damage(player, health, 20, 1.5)
    assert health.current == 0


def test_invulnerability_expires():
    player = _player()
    player.invulnerable, player.invulnerable_timer = True, 0.25
    tick_invulnerability(player, 0.2)
    assert player.invulnerable
    tick_invulnerability(player, 0.1)
    assert not player.invulnerable
    assert not player.blink


def test_revert_returns_to_basic_after_duration():
    player = _player()
    activate_power_up(player, Weapon.SPREAD, now=2.0, duration=8.0)
    assert player.weapon is Weapon.SPREAD
    assert not fire_due_reverts(player, 9.9)
    assert fire_due_reverts(player, 10.0)
    assert player.weapon is Weapon.BASIC
    assert player.pending_reverts == []


def test_superseded_revert_is_ignored():
    player = _player()
    activate_power_up(player, Weapon.SPREAD, now=0.0)
    activate_power_up(player, Weapon.HEAVY, now=3.0)

    # the spread timer fires but the weapon is no longer spread
    assert not fire_due_reverts(player, 8.0)
    assert player.weapon is Weapon.HEAVY
    assert len(player.pending_reverts) == 1

    assert fire_due_reverts(player, 11.0)
    assert player.weapon is Weapon.BASIC


def test_same_weapon_twice_reverts_at_first_timer():
    player = _player()
    activate_power_up(player, Weapon.SPREAD, now=0.0)
    activate_power_up(player, Weapon.SPREAD, now=5.0)
    assert fire_due_reverts(player, 8.0)
    assert player.weapon is Weapon.BASIC
    # the later timer finds the weapon already basic
    assert not fire_due_reverts(player, 13.0)


def test_player_shot_patterns():
    settings = default_settings()
    pos, box = Position(100, 500), Footprint(50, 50)

    basic = player_shots(pos, box, Weapon.BASIC, settings)
    assert len(basic) == 1
    assert basic[0].x == 123 and basic[0].vy == -600 and basic[0].damage == 10

    spread = player_shots(pos, box, Weapon.SPREAD, settings)
    assert len(spread) == 3
    assert sorted(s.vx for s in spread) == [-120, 0, 120]
    assert spread[1].vy == pytest.approx(-540)

    heavy = player_shots(pos, box, Weapon.HEAVY, settings)
    assert len(heavy) == 1
    assert (heavy[0].width, heavy[0].height, heavy[0].damage) == (10, 30, 20)
    assert heavy[0].y == 490


def test_basic_enemy_fires_and_rerolls(state):
    enemy = Enemy(kind=EnemyKind.BASIC, speed=90, score_value=10, fire_timer=0.01)
    pos, box, vel = Position(200, 100), Footprint(40, 40), Velocity()
    ENEMY_BEHAVIORS[EnemyKind.BASIC](state, pos, box, vel, enemy, 0.02)

    lasers = [p for _, p in state.world.get_component(Projectile) if p.owner is Owner.ENEMY]
    assert len(lasers) == 1
    assert vel.y == 90
    assert 1.0 <= enemy.fire_timer <= 2.95


def test_enemy_near_bottom_holds_fire(state):
    enemy = Enemy(kind=EnemyKind.SHOOTER, speed=72, score_value=20, fire_timer=0.0)
    pos, box = Position(200, 560), Footprint(40, 40)
    ENEMY_BEHAVIORS[EnemyKind.SHOOTER](state, pos, box, Velocity(), enemy, 0.02)
    assert state.world.get_component(Projectile) == []


def test_charger_charges_when_aligned(state):
    enemy = Enemy(kind=EnemyKind.CHARGER, speed=135, score_value=25, charge_delay=0.5, charge_speed=270)
    # player center is x=400
    pos, box, vel = Position(375, 200), Footprint(50, 50), Velocity()
    behave = ENEMY_BEHAVIORS[EnemyKind.CHARGER]

    behave(state, pos, box, vel, enemy, 0.3)
    assert not enemy.charging
    assert vel.y == 135
    behave(state, pos, box, vel, enemy, 0.3)
    assert enemy.charging
    assert vel.y == 270


def test_charger_ignores_offset_player(state):
    enemy = Enemy(kind=EnemyKind.CHARGER, speed=135, score_value=25, charge_delay=0.1, charge_speed=270)
    pos, box, vel = Position(50, 300), Footprint(50, 50), Velocity()
    for _ in range(5):
        ENEMY_BEHAVIORS[EnemyKind.CHARGER](state, pos, box, vel, enemy, 0.1)
    assert not enemy.charging
    assert enemy.charge_timer == 0


def test_charger_waits_in_top_quarter(state):
    enemy = Enemy(kind=EnemyKind.CHARGER, speed=135, score_value=25, charge_delay=0.1, charge_speed=270)
    pos, box, vel = Position(375, 100), Footprint(50, 50), Velocity()
    for _ in range(5):
        ENEMY_BEHAVIORS[EnemyKind.CHARGER](state, pos, box, vel, enemy, 0.1)
    assert not enemy.charging
