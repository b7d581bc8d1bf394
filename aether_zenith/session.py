from __future__ import annotations

import random
from enum import Enum
from typing import Iterable, List, Optional

from .config import Settings
from .content import Content
from .context import NOTIFICATION_DURATIONS, Notification, SimulationState
from .log import get_logger
from .meta import ProfileStore
from .progression import Progression, PurchaseResult, UpgradeSet, player_stats, purchase_upgrade
from .simulation import new_state, tick
from .snapshot import Snapshot, take_snapshot

logger = get_logger(__name__)


class GameStatus(str, Enum):
    MENU = "menu"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"
    UPGRADES = "upgrades"


class Session:
    """Owns the simulation state and the screen state machine.

    Every control method is one atomic transition and returns whether it
    was applied.
    """

    def __init__(
        self,
        settings: Settings,
        content: Content,
        store: ProfileStore,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.settings = settings
        self.content = content
        self.store = store
        self.rng = rng or random.Random(settings.simulation.seed)
        self.store.load()
        self.upgrades = UpgradeSet.from_content(content, store.load_upgrades())
        self.status = GameStatus.MENU
        self.state: Optional[SimulationState] = None
        self._pending: List[Notification] = []

    def _move(self, allowed: Iterable[GameStatus], target: GameStatus) -> bool:
        if self.status not in tuple(allowed):
            logger.debug("Ignored transition %s -> %s", self.status.value, target.value)
            return False
        logger.info("Session %s -> %s", self.status.value, target.value)
        self.status = target
        return True

    def _new_run(self) -> None:
        run_rng = random.Random(self.rng.random())
        self.state = new_state(self.settings, self.content, self.store, upgrades=self.upgrades, rng=run_rng)

    def start_session(self) -> bool:
        if not self._move((GameStatus.MENU,), GameStatus.PLAYING):
            return False
        self._new_run()
        return True

    def pause_session(self) -> bool:
        return self._move((GameStatus.PLAYING,), GameStatus.PAUSED)

    def resume_session(self) -> bool:
        return self._move((GameStatus.PAUSED,), GameStatus.PLAYING)

    def restart_session(self) -> bool:
        if not self._move((GameStatus.GAME_OVER, GameStatus.PAUSED), GameStatus.PLAYING):
            return False
        self._new_run()
        return True

    def end_session(self) -> bool:
        if not self._move((GameStatus.GAME_OVER, GameStatus.PAUSED, GameStatus.UPGRADES), GameStatus.MENU):
            return False
        self.state = None
        return True

    def open_upgrades(self) -> bool:
        return self._move((GameStatus.MENU,), GameStatus.UPGRADES)

    def toggle_pause(self) -> bool:
        if self.status is GameStatus.PLAYING:
            return self.pause_session()
        if self.status is GameStatus.PAUSED:
            return self.resume_session()
        return False

    def set_input(self, held: Iterable[str]) -> None:
        if self.state is not None:
            self.state.input.held = set(held)

    def tick(self, dt: float) -> bool:
        """Run one simulation step if playing. Returns True if a step ran."""
        if self.status is not GameStatus.PLAYING or self.state is None:
            return False
        self.state = tick(self.state, dt)
        if self.state.game_over:
            prog = self.state.progression
            logger.info("Game over: score %d, level %d", prog.score, prog.level)
            self.status = GameStatus.GAME_OVER
        return True

    @property
    def credits(self) -> float:
        if self.state is not None:
            return self.state.progression.credits
        return self.store.get_credits()

    def purchase_upgrade(self, category: str) -> PurchaseResult:
        if self.state is not None:
            progression = self.state.progression
        else:
            progression = Progression(upgrades=self.upgrades, credits=self.store.get_credits())
        result = purchase_upgrade(progression, category)
        if not result.ok:
            logger.info("Upgrade %s rejected: %s", category, result.reason)
            self._notify("upgrade_rejected", _rejection_message(result))
            return result
        self.store.save_credits(progression.credits)
        self.store.save_upgrades(self.upgrades.levels())
        logger.info("Upgraded %s to %d for %d credits", category, result.level, result.cost)
        self._apply_stats()
        return result

    def _apply_stats(self) -> None:
        """Push upgrade-derived stats onto the live ship, if there is one."""
        if self.state is None or self.state.player is None:
            return
        _, _, player, health = self.state.player_parts()
        stats = player_stats(self.settings, self.upgrades)
        player.speed = stats.speed
        player.fire_cooldown = stats.fire_cooldown
        health.max_hp = stats.max_health
        health.current = min(health.current, health.max_hp)

    def reset_profile(self) -> None:
        self.store.reset()
        self.upgrades = UpgradeSet.from_content(self.content)
        if self.state is not None:
            self.state.progression.upgrades = self.upgrades
            self.state.progression.credits = 0.0
        self._apply_stats()
        logger.info("Profile reset")

    def _notify(self, kind: str, message: str) -> None:
        if self.state is not None:
            self.state.notify(kind, message)
        else:
            self._pending.append(Notification(kind, message, NOTIFICATION_DURATIONS.get(kind, 1.2)))

    def drain_notifications(self) -> List[Notification]:
        out = self._pending
        self._pending = []
        if self.state is not None:
            out.extend(self.state.notifications)
            self.state.notifications = []
        return out

    def snapshot(self) -> Optional[Snapshot]:
        if self.state is None:
            return None
        return take_snapshot(self.state, self.status.value)


def _rejection_message(result: PurchaseResult) -> str:
    if result.reason == "max_level":
        return "Already at max level!"
    if result.reason == "insufficient_credits":
        return f"Not enough credits! ({result.cost} needed)"
    return f"Unknown upgrade: {result.category}"
