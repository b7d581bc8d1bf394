from __future__ import annotations

import pygame

from .config import Settings, load_settings
from .content import Content
from .log import get_logger, setup_logging
from .meta import ProfileStore
from .render import Renderer
from .session import GameStatus, Session
from .ui import GameUI

logger = get_logger(__name__)

PAUSE_KEYS = (pygame.K_p, pygame.K_ESCAPE)


def held_keys() -> set[str]:
    keys = pygame.key.get_pressed()
    held = set()
    if keys[pygame.K_LEFT] or keys[pygame.K_a]:
        held.add("left")
    if keys[pygame.K_RIGHT] or keys[pygame.K_d]:
        held.add("right")
    if keys[pygame.K_SPACE]:
        held.add("fire")
    return held


class Game:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.clock = pygame.time.Clock()
        self.screen = pygame.display.set_mode((settings.window.width, settings.window.height))
        pygame.display.set_caption(settings.window.title)

        self.session = Session(settings, Content(), ProfileStore(settings.meta.save_path))
        self.renderer = Renderer(settings.window.width, settings.window.height)
        self.ui = GameUI(settings.window.width, settings.window.height)
        self.running = True
        self._shown: GameStatus | None = None

    # Button callbacks
    def _start(self) -> None:
        self.session.start_session()

    def _restart(self) -> None:
        self.session.restart_session()

    def _menu(self) -> None:
        self.session.end_session()

    def _upgrades(self) -> None:
        self.session.open_upgrades()

    def _buy(self, category: str) -> None:
        self.session.purchase_upgrade(category)
        self.ui.refresh_upgrades(self.session.upgrades, self.session.credits)

    def _quit(self) -> None:
        self.running = False

    def _sync_screen(self) -> None:
        status = self.session.status
        if status is self._shown:
            return
        self._shown = status
        if status is GameStatus.MENU:
            self.ui.hide_hud()
            self.ui.open_main_menu(self._start, self._upgrades, self._quit)
        elif status is GameStatus.PAUSED:
            self.ui.open_pause(self.session.resume_session, self._restart, self._menu)
        elif status is GameStatus.GAME_OVER:
            prog = self.session.state.progression
            self.ui.open_game_over(prog.score, prog.level, self._restart, self._menu)
        elif status is GameStatus.UPGRADES:
            self.ui.hide_hud()
            self.ui.open_upgrades(self.session.upgrades, self.session.credits, self._buy, self._menu)
        else:
            self.ui.close_screen()

    def run(self) -> None:
        fps = self.settings.window.fps
        while self.running:
            dt = min(self.clock.tick(fps) / 1000.0, 0.05)
            for event in pygame.event.get():
                self.ui.process_event(event)
                if event.type == pygame.QUIT:
                    self.running = False
                elif event.type == pygame.KEYUP and event.key in PAUSE_KEYS:
                    self.session.toggle_pause()

            self.session.set_input(held_keys())
            self.session.tick(dt)
            for note in self.session.drain_notifications():
                self.ui.show_banner(note.message, note.duration)
            self._sync_screen()

            snap = self.session.snapshot()
            if snap is not None and self.session.status is not GameStatus.MENU and self.session.status is not GameStatus.UPGRADES:
                self.renderer.draw(self.screen, snap)
                self.ui.update_hud(snap)
            else:
                self.screen.fill((18, 18, 22))
            self.ui.update(dt)
            self.ui.draw(self.screen)
            pygame.display.flip()

    @staticmethod
    def init_pygame():
        pygame.init()


def run_game() -> None:
    settings = load_settings()
    setup_logging(settings.logging.level)
    Game.init_pygame()
    logger.info("Starting %s", settings.window.title)
    try:
        Game(settings).run()
    finally:
        pygame.quit()
