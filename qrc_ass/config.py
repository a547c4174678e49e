from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def _config_dir() -> Path:
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "qrc-ass"
    return Path.home() / ".config" / "qrc-ass"


def _config_file() -> Path:
    return _config_dir() / "config.json"


@dataclass(frozen=True, slots=True)
class AssStyle:
    """Fixed Dialogue fields written by the ASS emitter."""

    layer: int = 0
    style: str = "Default"
    name: str = ""
    margin_l: int = 0
    margin_r: int = 0
    margin_v: int = 0
    effect: str = ""


@dataclass(frozen=True)
class AppConfig:
    config_dir: Path

    # ASS output
    ass_style: AssStyle = field(default_factory=AssStyle)
    full_header: bool = False

    # Timing
    rounding: str = "truncate"  # truncate | round, for Dialogue start/end
    header_tolerance_ms: int = 10


def parse_margins(value: str) -> tuple[int, int, int]:
    """`"10,10,60"` -> (10, 10, 60)"""
    parts = [p.strip() for p in value.split(",")]
    if len(parts) != 3:
        raise ValueError(f"Margins must be L,R,V, got {value!r}")
    left, right, vertical = (int(p) for p in parts)
    return left, right, vertical


def _load_file(config_dir: Path) -> dict[str, Any]:
    cfg_path = config_dir / "config.json"
    if not cfg_path.exists():
        return {}
    try:
        data = json.loads(cfg_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable config %s: %s", cfg_path, e)
        return {}
    return data if isinstance(data, dict) else {}


def load_config() -> AppConfig:
    # Priority: env → config.json → defaults
    config_dir = _config_dir()
    data = _load_file(config_dir)
    style_data = data.get("ass_style") or {}

    margins = (
        int(style_data.get("margin_l", 0)),
        int(style_data.get("margin_r", 0)),
        int(style_data.get("margin_v", 0)),
    )
    margins_env = os.getenv("QRC_ASS_MARGINS")
    if margins_env:
        margins = parse_margins(margins_env)

    ass_style = AssStyle(
        layer=int(os.getenv("QRC_ASS_LAYER", style_data.get("layer", 0))),
        style=os.getenv("QRC_ASS_STYLE") or style_data.get("style") or "Default",
        name=style_data.get("name", ""),
        margin_l=margins[0],
        margin_r=margins[1],
        margin_v=margins[2],
        effect=style_data.get("effect", ""),
    )

    full_header_env = os.getenv("QRC_ASS_FULL_HEADER")
    if full_header_env is not None:
        full_header = full_header_env not in ("0", "false", "False", "")
    else:
        full_header = bool(data.get("full_header", False))

    rounding = (os.getenv("QRC_ASS_ROUNDING") or data.get("rounding") or "truncate").lower()
    if rounding not in ("truncate", "round"):
        logger.warning("Unknown rounding mode %r, using truncate", rounding)
        rounding = "truncate"

    return AppConfig(
        config_dir=config_dir,
        ass_style=ass_style,
        full_header=full_header,
        rounding=rounding,
        header_tolerance_ms=int(os.getenv("QRC_ASS_HEADER_TOLERANCE_MS", data.get("header_tolerance_ms", 10))),
    )


def save_config_style(style: AssStyle) -> None:
    cfg_path = _config_file()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    data = _load_file(cfg_path.parent)
    data["ass_style"] = {
        "layer": style.layer,
        "style": style.style,
        "name": style.name,
        "margin_l": style.margin_l,
        "margin_r": style.margin_r,
        "margin_v": style.margin_v,
        "effect": style.effect,
    }
    cfg_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
