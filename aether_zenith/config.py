from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


@dataclass
class WindowConfig:
    width: int = 800
    height: int = 600
    title: str = "Aether Zenith"
    fps: int = 60


@dataclass
class PlayerConfig:
    width: int = 50
    height: int = 50
    bottom_margin: int = 30
    base_speed: float = 300.0
    base_max_health: int = 100
    invulnerability: float = 1.5
    color: tuple[int, int, int] = (0, 188, 212)


@dataclass
class WeaponConfig:
    base_cooldown: float = 0.2
    laser_speed: float = 600.0
    laser_damage: int = 10
    spread_drift: float = 120.0
    power_up_duration: float = 8.0


@dataclass
class EnemyConfig:
    base_speed: float = 90.0
    base_health: float = 10.0
    laser_speed: float = 300.0
    laser_damage: int = 10
    charge_align_threshold: float = 50.0


@dataclass
class SpawnConfig:
    base_interval: float = 1.5
    interval_step: float = 0.05
    min_interval: float = 0.5
    base_cap: int = 8


@dataclass
class PowerUpConfig:
    size: int = 30
    speed: float = 120.0
    base_drop_chance: float = 0.2
    drop_chance_per_level: float = 0.02
    heal_amount: int = 50


@dataclass
class EffectsConfig:
    particle_lifespan: float = 1.0
    explosion_gravity: float = 360.0
    shake_magnitude: float = 5.0
    shake_duration: float = 1.0 / 3.0
    thrusters: bool = True


@dataclass
class ProgressionConfig:
    level_up_threshold: int = 1000
    credit_rate: float = 0.1
    ram_damage: int = 20
    escape_damage: int = 10


@dataclass
class MetaConfig:
    save_path: str = "save/profile.json"


@dataclass
class LoggingConfig:
    level: str = "INFO"


@dataclass
class SimulationConfig:
    seed: Optional[int] = None


@dataclass
class Settings:
    window: WindowConfig
    player: PlayerConfig
    weapons: WeaponConfig
    enemy: EnemyConfig
    spawning: SpawnConfig
    powerups: PowerUpConfig
    effects: EffectsConfig
    progression: ProgressionConfig
    meta: MetaConfig
    logging: LoggingConfig
    simulation: SimulationConfig


def _tuple3(v: Any, default: tuple[int, int, int]) -> tuple[int, int, int]:
    try:
        a, b, c = v
        return int(a), int(b), int(c)
    except (TypeError, ValueError):
        return default


def default_settings() -> Settings:
    return Settings(
        window=WindowConfig(),
        player=PlayerConfig(),
        weapons=WeaponConfig(),
        enemy=EnemyConfig(),
        spawning=SpawnConfig(),
        powerups=PowerUpConfig(),
        effects=EffectsConfig(),
        progression=ProgressionConfig(),
        meta=MetaConfig(),
        logging=LoggingConfig(),
        simulation=SimulationConfig(),
    )


def load_settings(path: str | Path = "config/settings.yaml") -> Settings:
    p = Path(path)
    raw: Dict[str, Any] = {}
    if p.exists():
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}

    d = default_settings()

    win = raw.get("window", {})
    window = WindowConfig(
        width=int(win.get("width", d.window.width)),
        height=int(win.get("height", d.window.height)),
        title=str(win.get("title", d.window.title)),
        fps=int(win.get("fps", d.window.fps)),
    )

    pl = raw.get("player", {})
    player = PlayerConfig(
        width=int(pl.get("width", d.player.width)),
        height=int(pl.get("height", d.player.height)),
        bottom_margin=int(pl.get("bottom_margin", d.player.bottom_margin)),
        base_speed=float(pl.get("base_speed", d.player.base_speed)),
        base_max_health=int(pl.get("base_max_health", d.player.base_max_health)),
        invulnerability=float(pl.get("invulnerability", d.player.invulnerability)),
        color=_tuple3(pl.get("color", d.player.color), d.player.color),
    )

    wp = raw.get("weapons", {})
    weapons = WeaponConfig(
        base_cooldown=float(wp.get("base_cooldown", d.weapons.base_cooldown)),
        laser_speed=float(wp.get("laser_speed", d.weapons.laser_speed)),
        laser_damage=int(wp.get("laser_damage", d.weapons.laser_damage)),
        spread_drift=float(wp.get("spread_drift", d.weapons.spread_drift)),
        power_up_duration=float(wp.get("power_up_duration", d.weapons.power_up_duration)),
    )

    en = raw.get("enemy", {})
    enemy = EnemyConfig(
        base_speed=float(en.get("base_speed", d.enemy.base_speed)),
        base_health=float(en.get("base_health", d.enemy.base_health)),
        laser_speed=float(en.get("laser_speed", d.enemy.laser_speed)),
        laser_damage=int(en.get("laser_damage", d.enemy.laser_damage)),
        charge_align_threshold=float(en.get("charge_align_threshold", d.enemy.charge_align_threshold)),
    )

    sp = raw.get("spawning", {})
    spawning = SpawnConfig(
        base_interval=float(sp.get("base_interval", d.spawning.base_interval)),
        interval_step=float(sp.get("interval_step", d.spawning.interval_step)),
        min_interval=float(sp.get("min_interval", d.spawning.min_interval)),
        base_cap=int(sp.get("base_cap", d.spawning.base_cap)),
    )

    pu = raw.get("powerups", {})
    powerups = PowerUpConfig(
        size=int(pu.get("size", d.powerups.size)),
        speed=float(pu.get("speed", d.powerups.speed)),
        base_drop_chance=float(pu.get("base_drop_chance", d.powerups.base_drop_chance)),
        drop_chance_per_level=float(pu.get("drop_chance_per_level", d.powerups.drop_chance_per_level)),
        heal_amount=int(pu.get("heal_amount", d.powerups.heal_amount)),
    )

    fx = raw.get("effects", {})
    effects = EffectsConfig(
        particle_lifespan=float(fx.get("particle_lifespan", d.effects.particle_lifespan)),
        explosion_gravity=float(fx.get("explosion_gravity", d.effects.explosion_gravity)),
        shake_magnitude=float(fx.get("shake_magnitude", d.effects.shake_magnitude)),
        shake_duration=float(fx.get("shake_duration", d.effects.shake_duration)),
        thrusters=bool(fx.get("thrusters", d.effects.thrusters)),
    )

    pg = raw.get("progression", {})
    progression = ProgressionConfig(
        level_up_threshold=int(pg.get("level_up_threshold", d.progression.level_up_threshold)),
        credit_rate=float(pg.get("credit_rate", d.progression.credit_rate)),
        ram_damage=int(pg.get("ram_damage", d.progression.ram_damage)),
        escape_damage=int(pg.get("escape_damage", d.progression.escape_damage)),
    )

    mt = raw.get("meta", {})
    meta = MetaConfig(save_path=str(mt.get("save_path", d.meta.save_path)))

    lg = raw.get("logging", {})
    logging_cfg = LoggingConfig(level=str(lg.get("level", d.logging.level)).upper())

    sim = raw.get("simulation", {})
    seed = sim.get("seed", d.simulation.seed)
    simulation = SimulationConfig(seed=int(seed) if seed is not None else None)

    return Settings(
        window=window,
        player=player,
        weapons=weapons,
        enemy=enemy,
        spawning=spawning,
        powerups=powerups,
        effects=effects,
        progression=progression,
        meta=meta,
        logging=logging_cfg,
        simulation=simulation,
    )
