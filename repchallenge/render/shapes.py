import pygame
from typing import Tuple


def draw_text(surface: pygame.Surface, text: str, pos: Tuple[int, int], color=(230, 230, 230), size=24):
    font = pygame.font.SysFont(None, size)
    surface.blit(font.render(text, True, color), pos)


def draw_text_centered(surface: pygame.Surface, text: str, center: Tuple[int, int], color=(230, 230, 230), size=24):
    font = pygame.font.SysFont(None, size)
    img = font.render(text, True, color)
    surface.blit(img, img.get_rect(center=center))


def draw_button(surface: pygame.Surface, rect: pygame.Rect, label: str, color=(230, 230, 230),
                active: bool = False, enabled: bool = True, size=26):
    """Outlined button; `active` fills it, disabled buttons are dimmed."""
    if not enabled:
        color = (90, 90, 90)
    if active:
        pygame.draw.rect(surface, color, rect, border_radius=8)
        text_color = (15, 18, 22)
    else:
        pygame.draw.rect(surface, color, rect, width=2, border_radius=8)
        text_color = color
    draw_text_centered(surface, label, rect.center, text_color, size=size)
