from __future__ import annotations

from typing import Tuple

import pygame

Color = Tuple[int, int, int]

CARD_FILL: Color = (255, 255, 255)
CARD_EDGE: Color = (40, 40, 40)
BUTTON_FILL: Color = (255, 214, 102)
CARD_MAX_SIZE = (460, 220)
BUTTON_MAX_SIZE = (240, 64)
CARD_BUTTON_GAP = 12


def draw_overlay(surface: pygame.Surface, *, alpha: int = 120, color: Color = (0, 0, 0)) -> None:
    overlay = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
    overlay.fill((*color, max(0, min(255, alpha))))
    surface.blit(overlay, (0, 0))


def draw_card(
    surface: pygame.Surface,
    rect: pygame.Rect,
    *,
    fill: Color = CARD_FILL,
    radius: int = 18,
) -> None:
    # 작은 카드는 모서리 반경도 줄인다
    radius = max(0, min(radius, rect.height // 2, rect.width // 2))
    shadow = pygame.Surface((rect.width + 10, rect.height + 10), pygame.SRCALPHA)
    pygame.draw.rect(shadow, (0, 0, 0, 40), shadow.get_rect(), border_radius=radius)
    surface.blit(shadow, (rect.x - 5, rect.y - 3))

    pygame.draw.rect(surface, fill, rect, border_radius=radius)
    pygame.draw.rect(surface, CARD_EDGE, rect, width=2, border_radius=radius)


def draw_text_at(surface: pygame.Surface, font: pygame.font.Font, text: str, center: Tuple[int, int], *, color: Color = (20, 20, 20)) -> None:
    rendered = font.render(text, True, color)
    surface.blit(rendered, rendered.get_rect(center=center))


def game_over_layout(surface: pygame.Surface) -> Tuple[pygame.Rect, pygame.Rect]:
    """Card and replay button rects, stacked and centered in ``surface``.

    Both shrink with the surface so the button always stays on screen.
    """
    w, h = surface.get_size()
    card_w = min(CARD_MAX_SIZE[0], w - 24)
    card_h = min(CARD_MAX_SIZE[1], h // 2)
    button_w = min(BUTTON_MAX_SIZE[0], w - 48)
    button_h = min(BUTTON_MAX_SIZE[1], h // 8)

    top = max(0, (h - (card_h + CARD_BUTTON_GAP + button_h)) // 2)
    card = pygame.Rect((w - card_w) // 2, top, card_w, card_h)
    button = pygame.Rect((w - button_w) // 2, card.bottom + CARD_BUTTON_GAP, button_w, button_h)
    return card, button


def draw_button(surface: pygame.Surface, rect: pygame.Rect, *, font: pygame.font.Font, label: str) -> None:
    draw_card(surface, rect, fill=BUTTON_FILL, radius=rect.height // 3)
    draw_text_at(surface, font, label, rect.center)


def draw_game_over_ui(
    surface: pygame.Surface,
    *,
    font_title: pygame.font.Font,
    font: pygame.font.Font,
    points: int,
    prev_points: int | None,
    hint: str,
) -> None:
    """게임오버 오버레이 + 카드 + 점수 텍스트."""
    draw_overlay(surface, alpha=120)

    card, _ = game_over_layout(surface)
    draw_card(surface, card)

    cx = card.centerx
    draw_text_at(surface, font_title, "GAME OVER", (cx, card.top + card.height * 22 // 100))
    draw_text_at(surface, font_title, str(points), (cx, card.top + card.height * 50 // 100), color=(35, 35, 35))
    if prev_points is not None:
        draw_text_at(surface, font, f"Previous: {prev_points}", (cx, card.top + card.height * 71 // 100), color=(70, 70, 70))
    draw_text_at(surface, font, hint, (cx, card.top + card.height * 87 // 100), color=(70, 70, 70))
