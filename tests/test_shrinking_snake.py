import pygame
import pytest

from conftest import SequenceRandom
from entities import Direction, Entity
from scheduler import Scheduler
from settings import HUD_HEIGHT, load_settings
from shrink_game import PAUSE, REPLAY, START, Game, GameState
from shrinking_snake import PygameView, command_for_key
from ui_common import draw_button, draw_card, game_over_layout


@pytest.fixture(scope="module")
def fonts():
    pygame.init()
    yield pygame.font.Font(None, 46), pygame.font.Font(None, 22)
    pygame.quit()


class TestKeyMapping:
    """Keyboard → command mapping."""

    @pytest.mark.parametrize(
        "key, command",
        [
            (pygame.K_UP, Direction.UP),
            (pygame.K_DOWN, Direction.DOWN),
            (pygame.K_LEFT, Direction.LEFT),
            (pygame.K_RIGHT, Direction.RIGHT),
            (pygame.K_SPACE, START),
            (pygame.K_p, PAUSE),
        ],
    )
    def test_known_keys(self, key, command):
        assert command_for_key(key) == command

    def test_unmapped_key(self):
        assert command_for_key(pygame.K_q) is None


class TestPygameView:
    """Sink bookkeeping and painting."""

    def test_draw_keeps_latest_box(self):
        view = PygameView()
        segment = Entity("snake", 0, 1, 1)
        view.draw(segment)
        segment.move(1, 2)
        view.draw(segment)
        assert view.boxes == {("snake", 0): (1, 2, 1)}

    def test_clear_forgets_everything(self):
        view = PygameView()
        view.draw(Entity("fruit", "regular-fruit", 3, 3))
        view.clear()
        assert view.boxes == {}

    def test_replay_toggle(self):
        view = PygameView()
        assert view.replay_visible
        assert view.replay_label == "PLAY"
        view.hide_replay()
        assert not view.replay_visible
        view.show_replay()
        assert view.replay_visible
        assert view.replay_label == "PLAY AGAIN"

    def test_update_score(self):
        view = PygameView()
        view.update_score(7)
        assert view.points == 7

    def test_to_rect_scales_and_offsets(self):
        view = PygameView(cell_pixels=16)
        rect = view.to_rect(113 / 32, 113 / 32, 50 - 113 / 16)
        assert rect.topleft == (56, HUD_HEIGHT + 56)
        assert rect.width == 687

    def test_replay_hit_only_when_visible(self):
        view = PygameView()
        surface = pygame.Surface((800, 848))
        center = view.replay_rect(surface).center
        assert view.replay_hit(surface, center)
        assert not view.replay_hit(surface, (0, 0))
        view.hide_replay()
        assert not view.replay_hit(surface, center)

    def test_render_every_state(self, fonts):
        font_title, font = fonts
        view = PygameView()
        game = Game(Scheduler(), renderer=view, replay=view, score=view, rng=SequenceRandom([0.5]))
        surface = pygame.Surface((800, 800 + HUD_HEIGHT))

        view.render(surface, game, font_title=font_title, font=font)
        game.start()
        game.scheduler.advance(300)
        view.render(surface, game, font_title=font_title, font=font)
        assert len(view.boxes) == 6
        game.end()
        view.render(surface, game, font_title=font_title, font=font)

        head = view.to_rect(0, 3, 1)
        assert surface.get_at(head.center)[:3] != (0, 0, 0)


class TestSmallWindows:
    """Game-over card and replay button stay reachable at every cell size."""

    @pytest.mark.parametrize("cell", ["1", "2", "6", "16", "24"])
    def test_layout_fits_window(self, cell):
        settings = load_settings({"SHRINK_SNAKE_CELL_PIXELS": cell})
        surface = pygame.Surface(settings.window_size)
        card, button = game_over_layout(surface)
        view = PygameView(settings.cell_pixels)
        assert surface.get_rect().contains(card)
        assert surface.get_rect().contains(button)
        assert button.top >= card.bottom
        assert view.replay_rect(surface) == button

    def test_replay_after_game_over_at_cell_6(self, fonts):
        font_title, font = fonts
        settings = load_settings({"SHRINK_SNAKE_CELL_PIXELS": "6"})
        surface = pygame.Surface(settings.window_size)
        view = PygameView(settings.cell_pixels)
        game = Game(Scheduler(), renderer=view, replay=view, score=view, rng=SequenceRandom([0.5]))
        game.start()
        game.end()
        view.render(surface, game, font_title=font_title, font=font)

        button = view.replay_rect(surface)
        assert view.replay_hit(surface, button.center)
        game.handle_command(REPLAY)
        assert game.state == GameState.PLAY


class TestCards:
    """Shared card and button drawing."""

    def test_card_fill_color(self):
        surface = pygame.Surface((200, 200))
        rect = pygame.Rect(20, 20, 160, 100)
        draw_card(surface, rect, fill=(10, 200, 30))
        assert surface.get_at(rect.center)[:3] == (10, 200, 30)

    def test_radius_clamped_for_tiny_rect(self):
        surface = pygame.Surface((40, 40))
        rect = pygame.Rect(5, 5, 10, 6)
        draw_card(surface, rect, radius=18)
        assert surface.get_at((rect.centerx, rect.top))[:3] != (0, 0, 0)

    def test_button_uses_button_fill(self, fonts):
        _, font = fonts
        surface = pygame.Surface((300, 200))
        rect = pygame.Rect(30, 60, 240, 64)
        draw_button(surface, rect, font=font, label="")
        assert surface.get_at((rect.left + 20, rect.centery))[:3] == (255, 214, 102)
