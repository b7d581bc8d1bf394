from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml


DEFAULT_ENEMIES: Dict[str, Dict[str, Any]] = {
    "basic": {
        "size": 40,
        "speed_mult": 1.0,
        "health_mult": 1.0,
        "score": 10,
        "color": (255, 0, 127),
        "unlock_level": 1,
        "fire_cooldown_min": 1.5,
        "fire_cooldown_spread": 2.0,
    },
    "charger": {
        "size": 50,
        "speed_mult": 1.5,
        "health_mult": 2.0,
        "score": 25,
        "color": (255, 69, 0),
        "unlock_level": 2,
        "charge_delay_min": 1.0,
        "charge_delay_spread": 2.0,
    },
    "shooter": {
        "size": 60,
        "speed_mult": 0.8,
        "health_mult": 1.5,
        "score": 20,
        "color": (138, 43, 226),
        "unlock_level": 3,
        "fire_cooldown_min": 0.8,
        "fire_cooldown_spread": 1.5,
    },
}

DEFAULT_UPGRADES: Dict[str, Dict[str, Any]] = {
    "hull": {"max_level": 5, "costs": [500, 1000, 2000, 3500, 5000], "bonus": 20},
    "engine": {"max_level": 5, "costs": [750, 1500, 2500, 4000, 6000], "bonus": 30.0},
    "weapon": {"max_level": 5, "costs": [1000, 2000, 3500, 5000, 7500], "bonus": 0.02},
}


def _load_yaml(path: str | Path) -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        return {}
    return yaml.safe_load(p.read_text(encoding="utf-8")) or {}


def _merge(defaults: Dict[str, Dict[str, Any]], loaded: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    out = {k: dict(v) for k, v in defaults.items()}
    for key, entry in loaded.items():
        out.setdefault(key, {}).update(entry or {})
    return out


class Content:
    def __init__(self, base_dir: str | Path = ".") -> None:
        self.base = Path(base_dir)
        self.enemies = _merge(DEFAULT_ENEMIES, _load_yaml(self.base / "data/enemies.yaml"))
        self.upgrades = _merge(DEFAULT_UPGRADES, _load_yaml(self.base / "data/upgrades.yaml"))

    def enemy(self, key: str) -> Dict[str, Any]:
        return dict(self.enemies.get(key, {}))

    def upgrade(self, key: str) -> Dict[str, Any]:
        return dict(self.upgrades.get(key, {}))

    def unlocked_enemies(self, level: int) -> list[str]:
        return [k for k, v in self.enemies.items() if int(v.get("unlock_level", 1)) <= level]
