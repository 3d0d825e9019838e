from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple, Union

import pygame

import crash_log
from entities import Direction, Entity, Size
from settings import (
    ARENA_COLOR,
    BACKGROUND_COLOR,
    BORDER_COLOR,
    CELL_PIXELS,
    FRUIT_COLOR,
    HUD_HEIGHT,
    SNAKE_COLOR,
    SNAKE_HEAD_COLOR,
    TEXT_COLOR,
    WINDOW_CAPTION,
    Settings,
    load_settings,
)
from scheduler import Scheduler
from shrink_game import PAUSE, REPLAY, START, Command, Game, GameState
from ui_common import draw_button, draw_game_over_ui, game_over_layout

logger = logging.getLogger(__name__)

FONT_CANDIDATES = (
    "Pretendard",
    "Apple SD Gothic Neo",
    "NanumGothic",
    "Noto Sans CJK KR",
    "Arial",
)

KEY_COMMANDS: Dict[int, Command] = {
    pygame.K_DOWN: Direction.DOWN,
    pygame.K_UP: Direction.UP,
    pygame.K_LEFT: Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT,
    pygame.K_SPACE: START,
    pygame.K_p: PAUSE,
}

EntityKey = Tuple[str, Union[int, str]]


def command_for_key(key: int) -> Optional[Command]:
    return KEY_COMMANDS.get(key)


def load_game_font(size: int) -> pygame.font.Font:
    """Pick the first installed candidate font, otherwise pygame's default."""
    for candidate in FONT_CANDIDATES:
        font_name = pygame.font.match_font(candidate)
        if font_name:
            return pygame.font.Font(font_name, size)
    return pygame.font.Font(None, size)


class PygameView:
    """Render, score and replay sink backed by a pygame surface.

    The game pushes entity boxes in ``draw``; the view keeps the latest box
    per entity and paints all of them each frame in ``render``.
    """

    def __init__(self, cell_pixels: int = CELL_PIXELS) -> None:
        self.cell_pixels = cell_pixels
        self.boxes: Dict[EntityKey, Tuple[Size, Size, Size]] = {}
        self.points = 0
        self.replay_visible = True
        self.replay_label = "PLAY"

    # --- sinks ---
    def draw(self, entity: Entity) -> None:
        self.boxes[(entity.kind, entity.ident)] = entity.box()

    def clear(self) -> None:
        self.boxes.clear()

    def show_replay(self) -> None:
        self.replay_visible = True
        self.replay_label = "PLAY AGAIN"

    def hide_replay(self) -> None:
        self.replay_visible = False

    def update_score(self, points: int) -> None:
        self.points = points

    # --- painting ---
    def to_rect(self, x: Size, y: Size, size: Size) -> pygame.Rect:
        cell = self.cell_pixels
        return pygame.Rect(round(x * cell), HUD_HEIGHT + round(y * cell), round(size * cell), round(size * cell))

    def replay_rect(self, surface: pygame.Surface) -> pygame.Rect:
        _, button = game_over_layout(surface)
        return button

    def replay_hit(self, surface: pygame.Surface, pos: Tuple[int, int]) -> bool:
        return self.replay_visible and self.replay_rect(surface).collidepoint(pos)

    def render(
        self,
        surface: pygame.Surface,
        game: Game,
        *,
        font_title: pygame.font.Font,
        font: pygame.font.Font,
    ) -> None:
        surface.fill(BACKGROUND_COLOR)
        arena = pygame.Rect(0, HUD_HEIGHT, surface.get_width(), surface.get_height() - HUD_HEIGHT)
        pygame.draw.rect(surface, ARENA_COLOR, arena)

        snake_boxes = []
        for (kind, ident), box in self.boxes.items():
            if kind == "border":
                pygame.draw.rect(surface, BORDER_COLOR, self.to_rect(*box), width=2)
            elif kind == "fruit":
                pygame.draw.rect(surface, FRUIT_COLOR, self.to_rect(*box))
            elif kind == "snake":
                snake_boxes.append((ident, box))

        # 머리가 꼬리 위에 그려지도록 역순
        for ident, box in sorted(snake_boxes, key=lambda item: item[0], reverse=True):
            color = SNAKE_HEAD_COLOR if ident == 0 else SNAKE_COLOR
            pygame.draw.rect(surface, color, self.to_rect(*box).inflate(-2, -2))

        hud = font.render(f"Points: {self.points}", True, TEXT_COLOR)
        surface.blit(hud, (16, (HUD_HEIGHT - hud.get_height()) // 2))
        if game.state == GameState.PAUSE:
            hint = font.render("SPACE: start  |  P: pause", True, TEXT_COLOR)
            surface.blit(hint, (surface.get_width() - hint.get_width() - 16, (HUD_HEIGHT - hint.get_height()) // 2))

        if game.state == GameState.END:
            draw_game_over_ui(
                surface,
                font_title=font_title,
                font=font,
                points=game.points,
                prev_points=game.prev_points,
                hint="Click PLAY AGAIN  |  ESC: quit",
            )
        if self.replay_visible:
            draw_button(surface, self.replay_rect(surface), font=font, label=self.replay_label)


def run_game(settings: Optional[Settings] = None, *, quit_on_exit: bool = True) -> None:
    """Open the window and run the game until it is closed."""
    settings = settings or load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    crash_log.install(settings.error_log)

    pygame.init()
    pygame.display.set_caption(WINDOW_CAPTION)
    screen = pygame.display.set_mode(settings.window_size)
    clock = pygame.time.Clock()
    font_title = load_game_font(46)
    font = load_game_font(22)

    scheduler = Scheduler()
    view = PygameView(settings.cell_pixels)
    game = Game(scheduler, renderer=view, replay=view, score=view)
    logger.info("window %dx%d, %d fps", *settings.window_size, settings.fps)

    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                    continue
                command = command_for_key(event.key)
                if command is not None:
                    game.handle_command(command)
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if view.replay_hit(screen, event.pos):
                    game.handle_command(REPLAY)

        scheduler.advance(clock.tick(settings.fps))
        view.render(screen, game, font_title=font_title, font=font)
        pygame.display.flip()

    game.stop()
    if quit_on_exit:
        pygame.quit()


def main() -> None:
    run_game()


if __name__ == "__main__":
    main()
