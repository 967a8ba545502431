import random
from collections import deque

from colorbook.fill import (
    SKIP_OUT_OF_BOUNDS,
    SKIP_SAME_COLOR,
    SKIP_STALE_TARGET,
    FillRequest,
    apply_fill,
    fill_skip_reason,
    flood_fill,
)
from colorbook.raster import RasterImage

WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)
RED = (255, 0, 0, 255)


def _ring_image():
    image = RasterImage.blank(4, 4, WHITE)
    for i in range(4):
        image.set_pixel(i, 0, BLACK)
        image.set_pixel(i, 3, BLACK)
        image.set_pixel(0, i, BLACK)
        image.set_pixel(3, i, BLACK)
    return image


def _reachable(image, seed, target):
    seen = {seed}
    queue = deque([seed])
    while queue:
        x, y = queue.popleft()
        for nx, ny in ((x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1)):
            if (nx, ny) in seen or not image.in_bounds(nx, ny):
                continue
            if image.get_pixel(nx, ny) != target:
                continue
            seen.add((nx, ny))
            queue.append((nx, ny))
    return seen


def test_fill_ring_interior():
    image = _ring_image()
    result = flood_fill(image, (1, 1), WHITE, RED)

    assert result is image
    for y in range(4):
        for x in range(4):
            expected = RED if x in (1, 2) and y in (1, 2) else BLACK
            assert image.get_pixel(x, y) == expected


def test_seed_on_border_is_noop():
    image = _ring_image()
    before = image.to_bytes()

    flood_fill(image, (0, 0), WHITE, RED)

    assert image.to_bytes() == before
    assert fill_skip_reason(image, (0, 0), WHITE, RED) == SKIP_STALE_TARGET


def test_out_of_bounds_seed_is_noop():
    image = _ring_image()
    before = image.to_bytes()

    for seed in [(-1, 1), (4, 1), (1, -1), (1, 4), (100, 100)]:
        flood_fill(image, seed, WHITE, RED)
        assert fill_skip_reason(image, seed, WHITE, RED) == SKIP_OUT_OF_BOUNDS

    assert image.to_bytes() == before


def test_target_equal_to_fill_is_noop():
    image = _ring_image()
    before = image.to_bytes()

    flood_fill(image, (1, 1), WHITE, WHITE)

    assert image.to_bytes() == before
    assert fill_skip_reason(image, (1, 1), WHITE, WHITE) == SKIP_SAME_COLOR


def test_fill_is_idempotent_once_applied():
    image = _ring_image()
    request = FillRequest(seed=(1, 1), target=WHITE, fill=RED)
    apply_fill(image, request)
    after_first = image.to_bytes()

    apply_fill(image, request)

    assert image.to_bytes() == after_first


def test_fill_uses_fill_color_channels():
    image = RasterImage.blank(2, 1, (10, 20, 30, 40))
    flood_fill(image, (0, 0), (10, 20, 30, 40), (50, 60, 70, 80))
    assert image.to_bytes() == bytes([50, 60, 70, 80]) * 2


def test_alpha_channel_is_part_of_the_match():
    image = RasterImage.blank(3, 1, WHITE)
    image.set_pixel(1, 0, (255, 255, 255, 254))

    flood_fill(image, (0, 0), WHITE, RED)

    assert image.get_pixel(0, 0) == RED
    assert image.get_pixel(1, 0) == (255, 255, 255, 254)
    assert image.get_pixel(2, 0) == WHITE


def test_fill_does_not_leak_through_diagonal_gaps():
    image = RasterImage.blank(3, 3, WHITE)
    # Diagonal wall from (2, 0) to (0, 2).
    for x, y in [(2, 0), (1, 1), (0, 2)]:
        image.set_pixel(x, y, BLACK)

    flood_fill(image, (0, 0), WHITE, RED)

    assert image.get_pixel(0, 0) == RED
    assert image.get_pixel(1, 0) == RED
    assert image.get_pixel(0, 1) == RED
    assert image.get_pixel(2, 2) == WHITE
    assert image.get_pixel(2, 1) == WHITE


def test_large_region_fills_without_recursion():
    image = RasterImage.blank(400, 300, WHITE)

    flood_fill(image, (200, 150), WHITE, RED)

    assert image.to_bytes() == bytes(RED) * (400 * 300)


def test_connectivity_matches_reference_on_random_images():
    rng = random.Random(1234)
    palette = [WHITE, BLACK]
    for _ in range(25):
        width = rng.randint(1, 12)
        height = rng.randint(1, 12)
        image = RasterImage.blank(width, height, WHITE)
        for y in range(height):
            for x in range(width):
                image.set_pixel(x, y, rng.choice(palette))
        seed = (rng.randrange(width), rng.randrange(height))
        target = image.get_pixel(*seed)
        original = image.copy()
        region = _reachable(original, seed, target)

        flood_fill(image, seed, target, RED)

        for y in range(height):
            for x in range(width):
                if (x, y) in region:
                    assert image.get_pixel(x, y) == RED
                else:
                    assert image.get_pixel(x, y) == original.get_pixel(x, y)
