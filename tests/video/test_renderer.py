"""Unit tests for the CHIP-8 video renderer."""

from __future__ import annotations

import pytest

from pychip8.video import COSMAC, HEIGHT, WIDTH, DisplayBuffer, Renderer, validate_palette


def test_render_single_pixel() -> None:
    display = DisplayBuffer()
    display.draw_sprite(0, 0, [0x80])
    result = Renderer().render(display.snapshot())

    assert result.width == 64
    assert result.height == 32
    assert result.get_pixel(0, 0) == (255, 255, 255)
    assert result.get_pixel(1, 0) == (0, 0, 0)


def test_render_scale_factor() -> None:
    display = DisplayBuffer()
    display.draw_sprite(1, 0, [0x80])
    result = Renderer().render(display.snapshot(), scale=4)

    assert result.width == WIDTH * 4
    assert result.height == HEIGHT * 4
    assert result.get_pixel(3, 0) == (0, 0, 0)
    assert result.get_pixel(4, 0) == (255, 255, 255)
    assert result.get_pixel(7, 3) == (255, 255, 255)
    assert result.get_pixel(8, 0) == (0, 0, 0)
    assert result.get_pixel(4, 4) == (0, 0, 0)


def test_render_uses_palette() -> None:
    result = Renderer(COSMAC).render((0,) * (WIDTH * HEIGHT))
    assert result.get_pixel(10, 10) == COSMAC[0]


def test_render_rejects_bad_snapshot() -> None:
    with pytest.raises(ValueError):
        Renderer().render((0,) * 10)


def test_get_pixel_bounds() -> None:
    result = Renderer().render((0,) * (WIDTH * HEIGHT))
    with pytest.raises(IndexError):
        result.get_pixel(64, 0)


def test_validate_palette() -> None:
    assert validate_palette([(0, 0, 0), (256, 1, 2)]) == ((0, 0, 0), (0, 1, 2))
    with pytest.raises(ValueError):
        validate_palette([(0, 0, 0)])
