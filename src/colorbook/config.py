from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml

from colorbook.outline import SHAPES
from colorbook.raster import Color, coerce_color

DEFAULT_CONFIG: Dict[str, Any] = {
    "data_root": "/data/colorbook",
    "log_level": "INFO",
    "canvas": {
        "width": 800,
        "height": 600,
        "background": [255, 255, 255, 255],
    },
    "picture": {
        "id": "pic_1",
        "outline": "",
        "shape": "square",
        "stroke_width": 4,
        "stroke_color": [0, 0, 0, 255],
    },
    "palette": [
        [220, 20, 60],
        [255, 105, 180],
        [138, 43, 226],
        [65, 105, 225],
        [30, 144, 255],
        [0, 191, 255],
        [0, 128, 128],
        [34, 139, 34],
        [154, 205, 50],
        [255, 215, 0],
        [255, 127, 0],
        [255, 99, 71],
        [210, 105, 30],
        [105, 105, 105],
        [255, 255, 255],
    ],
}

_FALLBACK_SIZE = (800, 600)


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if (
            key in merged
            and isinstance(merged[key], dict)
            and isinstance(value, dict)
        ):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _candidate_config_paths() -> list[Path]:
    env_path = os.environ.get("COLORBOOK_CONFIG")
    paths = []
    if env_path:
        paths.append(Path(env_path))
    paths.extend([
        Path("config.yaml"),
        Path("/opt/colorbook/config.yaml"),
    ])
    return paths


def load_config() -> Dict[str, Any]:
    config = dict(DEFAULT_CONFIG)
    for path in _candidate_config_paths():
        if path.exists():
            with path.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
            if isinstance(data, dict):
                config = _deep_merge(config, data)
            break
    return config


def canvas_size(config: Dict[str, Any]) -> Tuple[int, int]:
    canvas = config.get("canvas", {})
    try:
        width = int(canvas.get("width", _FALLBACK_SIZE[0]))
        height = int(canvas.get("height", _FALLBACK_SIZE[1]))
    except (TypeError, ValueError):
        return _FALLBACK_SIZE
    if width <= 0 or height <= 0:
        return _FALLBACK_SIZE
    return width, height


def canvas_background(config: Dict[str, Any]) -> Color:
    value = config.get("canvas", {}).get("background", (255, 255, 255, 255))
    try:
        return coerce_color(value)
    except (TypeError, ValueError):
        return (255, 255, 255, 255)


def picture_settings(config: Dict[str, Any]) -> Dict[str, Any]:
    defaults = DEFAULT_CONFIG["picture"]
    picture = _deep_merge(defaults, config.get("picture") or {})
    picture["id"] = str(picture.get("id") or defaults["id"])
    picture["outline"] = str(picture.get("outline") or "")
    if picture.get("shape") not in SHAPES:
        picture["shape"] = defaults["shape"]
    try:
        picture["stroke_width"] = max(1, int(picture.get("stroke_width", defaults["stroke_width"])))
    except (TypeError, ValueError):
        picture["stroke_width"] = defaults["stroke_width"]
    try:
        picture["stroke_color"] = coerce_color(picture.get("stroke_color"))
    except (TypeError, ValueError):
        picture["stroke_color"] = coerce_color(defaults["stroke_color"])
    return picture


def palette_colors(config: Dict[str, Any]) -> List[Color]:
    colors: List[Color] = []
    for value in config.get("palette", []) or []:
        try:
            colors.append(coerce_color(value))
        except (TypeError, ValueError):
            continue
    return colors
