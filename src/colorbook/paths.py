from __future__ import annotations

from pathlib import Path
from typing import Dict, Any


def get_data_root(config: Dict[str, Any]) -> Path:
    root = config.get("data_root", "/data/colorbook")
    return Path(root).expanduser().resolve()


def ensure_directories(data_root: Path) -> Dict[str, Path]:
    drawings_dir = data_root / "drawings"
    exports_dir = data_root / "exports"

    drawings_dir.mkdir(parents=True, exist_ok=True)
    exports_dir.mkdir(parents=True, exist_ok=True)

    return {
        "drawings": drawings_dir,
        "exports": exports_dir,
    }
