from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Optional

import pygame
import pygame_gui

from .progression import CATEGORIES, UpgradeSet
from .snapshot import Snapshot

UPGRADE_LABELS = {"hull": "Hull", "engine": "Engine", "weapon": "Weapon"}


class GameUI:
    def __init__(self, width: int, height: int) -> None:
        theme_path = Path('assets/ui/theme.json')
        self.manager = pygame_gui.UIManager((width, height), theme_path if theme_path.exists() else None)
        self.width = width
        self.height = height

        # Current menu screen (main / pause / game over / upgrades)
        self.screen_name: Optional[str] = None
        self.screen_elements: List[pygame_gui.core.UIElement] = []
        self.actions: Dict[pygame_gui.core.UIElement, Callable[[], None]] = {}
        self.credits_label: Optional[pygame_gui.elements.UILabel] = None
        self.upgrade_rows: Dict[str, tuple] = {}

        # HUD elements
        self.hud_panel: Optional[pygame_gui.elements.UIPanel] = None
        self.hp_bar: Optional[pygame_gui.elements.UIProgressBar] = None
        self.score_label: Optional[pygame_gui.elements.UILabel] = None
        self.level_label: Optional[pygame_gui.elements.UILabel] = None
        self.weapon_label: Optional[pygame_gui.elements.UILabel] = None
        # Banner
        self.banner_label: Optional[pygame_gui.elements.UILabel] = None
        self.banner_time_left: float = 0.0

    def process_event(self, event: pygame.event.Event) -> None:
        self.manager.process_events(event)
        if event.type == pygame_gui.UI_BUTTON_PRESSED:
            fn = self.actions.get(event.ui_element)
            if fn is not None:
                fn()

    def update(self, dt: float) -> None:
        self.manager.update(dt)
        if self.banner_time_left > 0:
            self.banner_time_left -= dt
            if self.banner_time_left <= 0 and self.banner_label is not None:
                self.banner_label.kill()
                self.banner_label = None

    def draw(self, surface: pygame.Surface) -> None:
        self.manager.draw_ui(surface)

    # Screens
    def close_screen(self) -> None:
        for el in self.screen_elements:
            el.kill()
        self.screen_elements = []
        self.actions.clear()
        self.upgrade_rows.clear()
        self.credits_label = None
        self.screen_name = None

    def _window(self, title: str, w: int, h: int) -> pygame_gui.elements.UIPanel:
        x, y = (self.width - w) // 2, (self.height - h) // 2
        panel = pygame_gui.elements.UIPanel(pygame.Rect(x, y, w, h), manager=self.manager)
        pygame_gui.elements.UILabel(pygame.Rect(10, 10, w - 20, 30), text=title, manager=self.manager, container=panel)
        self.screen_elements.append(panel)  # killing the panel kills its children
        return panel

    def _button(self, panel, rect: pygame.Rect, text: str, fn: Callable[[], None]) -> pygame_gui.elements.UIButton:
        btn = pygame_gui.elements.UIButton(relative_rect=rect, text=text, manager=self.manager, container=panel)
        self.actions[btn] = fn
        return btn

    def open_main_menu(self, on_start: Callable[[], None], on_upgrades: Callable[[], None], on_quit: Callable[[], None]) -> None:
        self.close_screen()
        panel = self._window('AETHER ZENITH', 300, 220)
        self._button(panel, pygame.Rect(50, 55, 200, 36), 'Start Game', on_start)
        self._button(panel, pygame.Rect(50, 100, 200, 36), 'Upgrades', on_upgrades)
        self._button(panel, pygame.Rect(50, 145, 200, 36), 'Quit', on_quit)
        self.screen_name = 'menu'

    def open_pause(self, on_resume: Callable[[], None], on_restart: Callable[[], None], on_menu: Callable[[], None]) -> None:
        self.close_screen()
        panel = self._window('Paused', 300, 220)
        self._button(panel, pygame.Rect(50, 55, 200, 36), 'Resume (P)', on_resume)
        self._button(panel, pygame.Rect(50, 100, 200, 36), 'Restart', on_restart)
        self._button(panel, pygame.Rect(50, 145, 200, 36), 'Main Menu', on_menu)
        self.screen_name = 'paused'

    def open_game_over(self, score: int, level: int, on_restart: Callable[[], None], on_menu: Callable[[], None]) -> None:
        self.close_screen()
        panel = self._window('GAME OVER', 320, 230)
        pygame_gui.elements.UILabel(pygame.Rect(10, 45, 300, 24), text=f'Final Score: {score}', manager=self.manager, container=panel)
        pygame_gui.elements.UILabel(pygame.Rect(10, 70, 300, 24), text=f'Level Reached: {level}', manager=self.manager, container=panel)
        self._button(panel, pygame.Rect(60, 110, 200, 36), 'Restart', on_restart)
        self._button(panel, pygame.Rect(60, 155, 200, 36), 'Main Menu', on_menu)
        self.screen_name = 'game_over'

    def open_upgrades(self, upgrades: UpgradeSet, credits: float, on_buy: Callable[[str], None], on_back: Callable[[], None]) -> None:
        self.close_screen()
        panel = self._window('Upgrades', 420, 300)
        self.credits_label = pygame_gui.elements.UILabel(pygame.Rect(10, 45, 400, 24), text='', manager=self.manager, container=panel)
        for i, key in enumerate(CATEGORIES):
            y = 80 + i * 50
            label = pygame_gui.elements.UILabel(pygame.Rect(10, y, 180, 36), text='', manager=self.manager, container=panel)
            btn = self._button(panel, pygame.Rect(200, y, 200, 36), '', lambda k=key: on_buy(k))
            self.upgrade_rows[key] = (label, btn)
        self._button(panel, pygame.Rect(110, 240, 200, 36), 'Back', on_back)
        self.screen_name = 'upgrades'
        self.refresh_upgrades(upgrades, credits)

    def refresh_upgrades(self, upgrades: UpgradeSet, credits: float) -> None:
        if self.credits_label is not None:
            self.credits_label.set_text(f'Credits: {int(credits)}')
        for key, (label, btn) in self.upgrade_rows.items():
            track = upgrades[key]
            label.set_text(f'{UPGRADE_LABELS[key]}  Lv.{track.level}')
            if track.maxed:
                btn.set_text('MAX LEVEL')
                btn.disable()
            else:
                btn.set_text(f'Upgrade ({track.next_cost} Cr)')
                if credits >= (track.next_cost or 0):
                    btn.enable()
                else:
                    btn.disable()

    # HUD helpers
    def ensure_hud(self) -> None:
        if self.hud_panel is not None:
            return
        self.hud_panel = pygame_gui.elements.UIPanel(pygame.Rect(10, 10, 380, 50), manager=self.manager)
        pygame_gui.elements.UILabel(pygame.Rect(4, 2, 24, 18), text='HP', manager=self.manager, container=self.hud_panel)
        self.hp_bar = pygame_gui.elements.UIProgressBar(pygame.Rect(28, 4, 160, 14), manager=self.manager, container=self.hud_panel)
        self.level_label = pygame_gui.elements.UILabel(pygame.Rect(196, 2, 70, 18), text='Lv 1', manager=self.manager, container=self.hud_panel)
        self.weapon_label = pygame_gui.elements.UILabel(pygame.Rect(266, 2, 110, 18), text='Basic', manager=self.manager, container=self.hud_panel)
        self.score_label = pygame_gui.elements.UILabel(pygame.Rect(4, 24, 370, 18), text='Score 0', manager=self.manager, container=self.hud_panel)

    def hide_hud(self) -> None:
        if self.hud_panel is not None:
            self.hud_panel.hide()

    def update_hud(self, snap: Snapshot) -> None:
        self.ensure_hud()
        self.hud_panel.show()
        self.hp_bar.set_current_progress(int(100 * snap.health_ratio))
        self.level_label.set_text(f'Lv {snap.level}')
        self.weapon_label.set_text(snap.weapon.title() + (' +Shield' if snap.shield else ''))
        self.score_label.set_text(f'Score {snap.score}   Credits {int(snap.credits)}')

    def show_banner(self, text: str, seconds: float = 1.2) -> None:
        if not text:
            return
        if self.banner_label is not None:
            self.banner_label.kill()
        width = min(600, self.width - 40)
        x = (self.width - width) // 2
        self.banner_label = pygame_gui.elements.UILabel(pygame.Rect(x, 70, width, 30), text=text, manager=self.manager)
        self.banner_time_left = seconds
