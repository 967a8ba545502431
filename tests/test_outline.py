import pygame
import pytest

from colorbook.outline import harden_outline, load_outline, sample_outline

BLACK = (0, 0, 0, 255)


def test_sample_square_has_exact_strokes():
    surface = sample_outline((60, 60), shape="square", stroke_width=2)
    assert surface.get_size() == (60, 60)
    assert tuple(surface.get_at((0, 0))) == (0, 0, 0, 0)
    assert tuple(surface.get_at((10, 10))) == BLACK
    assert tuple(surface.get_at((30, 30))) == (0, 0, 0, 0)


def test_sample_oval_is_transparent_in_the_middle():
    surface = sample_outline((60, 60), shape="oval", stroke_width=2)
    assert tuple(surface.get_at((30, 30))) == (0, 0, 0, 0)
    assert any(tuple(surface.get_at((30, y))) == BLACK for y in range(9, 14))


def test_sample_outline_rejects_unknown_shape():
    with pytest.raises(ValueError):
        sample_outline((10, 10), shape="star")


def test_load_outline_missing_file(tmp_path):
    assert load_outline(tmp_path / "missing.png") is None
    assert load_outline(None) is None


def test_load_outline_returns_none_on_image_error(monkeypatch, tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"not-an-image")

    def _raise(*_args, **_kwargs):
        raise pygame.error("bad image")

    monkeypatch.setattr(pygame.image, "load", _raise)
    assert load_outline(path) is None


def test_load_outline_makes_white_paper_transparent(tmp_path):
    artwork = pygame.Surface((4, 4), 0, 24)
    artwork.fill((255, 255, 255))
    artwork.set_at((1, 1), (0, 0, 0))
    path = tmp_path / "outline.bmp"
    pygame.image.save(artwork, str(path))

    outline = load_outline(path)

    assert outline is not None
    assert outline.get_flags() & pygame.SRCALPHA
    assert tuple(outline.get_at((1, 1))) == BLACK
    assert outline.get_at((0, 0)).a == 0


def test_harden_outline_snaps_alpha_to_stroke_or_paper():
    soft = pygame.Surface((3, 1), pygame.SRCALPHA, 32)
    soft.set_at((0, 0), (10, 20, 30, 200))
    soft.set_at((1, 0), (10, 20, 30, 128))
    soft.set_at((2, 0), (10, 20, 30, 127))

    hard = harden_outline(soft)

    assert tuple(hard.get_at((0, 0))) == (10, 20, 30, 255)
    assert tuple(hard.get_at((1, 0))) == (10, 20, 30, 255)
    assert hard.get_at((2, 0)).a == 0
    assert soft.get_at((0, 0)).a == 200


def test_load_outline_hardens_antialiased_png(tmp_path):
    artwork = pygame.Surface((4, 4), pygame.SRCALPHA, 32)
    artwork.set_at((1, 1), (0, 0, 0, 180))
    artwork.set_at((2, 2), (0, 0, 0, 40))
    path = tmp_path / "soft.png"
    pygame.image.save(artwork, str(path))

    outline = load_outline(path)

    assert tuple(outline.get_at((1, 1))) == BLACK
    assert outline.get_at((2, 2)).a == 0
