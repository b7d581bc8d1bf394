from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from .log import get_logger

logger = get_logger(__name__)


@dataclass
class Profile:
    credits: float = 0.0
    upgrades: Optional[Dict[str, int]] = None

    def to_dict(self):
        return {
            "credits": self.credits,
            "upgrades": self.upgrades or {},
        }


class ProfileStore:
    """JSON-backed credits and upgrade levels, written through on every change."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.profile = Profile()
        self._loaded = False

    def load(self) -> Profile:
        if self.path.exists():
            try:
                data = json.loads(self.path.read_text(encoding="utf-8"))
                raw_upgrades = data.get("upgrades")
                self.profile = Profile(
                    credits=max(0.0, float(data.get("credits", 0.0))),
                    upgrades={str(k): int(v) for k, v in raw_upgrades.items()} if raw_upgrades else None,
                )
            except (OSError, ValueError, TypeError, AttributeError) as exc:
                logger.warning("Could not read profile %s (%s); using defaults", self.path, exc)
                self.profile = Profile()
        else:
            self.profile = Profile()
        self._loaded = True
        return self.profile

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    def save(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(self.profile.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not write profile %s: %s", self.path, exc)

    def get_credits(self) -> float:
        self._ensure_loaded()
        return self.profile.credits

    def save_credits(self, amount: float) -> None:
        self._ensure_loaded()
        self.profile.credits = float(amount)
        self.save()

    def load_upgrades(self) -> Optional[Dict[str, int]]:
        self._ensure_loaded()
        if not self.profile.upgrades:
            return None
        return dict(self.profile.upgrades)

    def save_upgrades(self, levels: Dict[str, int]) -> None:
        self._ensure_loaded()
        self.profile.upgrades = dict(levels)
        self.save()

    def reset(self) -> Profile:
        self.profile = Profile()
        self._loaded = True
        self.save()
        return self.profile
