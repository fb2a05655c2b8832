# src/midiroll/config.py
from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, Optional
import copy
import logging
import yaml

from .timeline import DEFAULT_CHARSET, DEFAULT_DPI, DEFAULT_MARKER

logger = logging.getLogger(__name__)

# Paket-Root: .../src/midiroll
PKG_ROOT = Path(__file__).resolve().parent
DEFAULT_CFG_PATH = PKG_ROOT / "config.default.yaml"
USER_CFG_PATH = Path.home() / ".config" / "midiroll" / "config.yaml"

def _safe_load(path: Path) -> Dict[str, Any]:
    try:
        if path.exists():
            return yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        # lieber leer zurückgeben als den Core zu crashen
        logger.warning("ignoring unreadable config %s: %s", path, e)
    return {}

def _deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(a)
    for k, v in (b or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = copy.deepcopy(v)
    return out

def load_config(
    user_path: Optional[Path] = None,
    default_path: Optional[Path] = None,
) -> Dict[str, Any]:
    """
    Loads the packaged defaults merged with user overrides.
    Keys: metadata_marker, length_dpi, width_dpi, tempo_dpi, charset,
    tracker_height.
    """
    dpath = Path(default_path) if default_path else DEFAULT_CFG_PATH
    upath = Path(user_path) if user_path else USER_CFG_PATH

    defaults = _safe_load(dpath)
    user = _safe_load(upath)
    cfg = _deep_merge(defaults, user)

    # Minimal-Defaults sicherstellen
    cfg.setdefault("metadata_marker", DEFAULT_MARKER)
    cfg.setdefault("length_dpi", DEFAULT_DPI)
    cfg.setdefault("width_dpi", DEFAULT_DPI)
    cfg.setdefault("tempo_dpi", DEFAULT_DPI)
    cfg.setdefault("charset", DEFAULT_CHARSET)
    cfg.setdefault("tracker_height", 0)

    return cfg

def get_marker(cfg: Dict[str, Any]) -> str:
    marker = cfg.get("metadata_marker", DEFAULT_MARKER)
    return DEFAULT_MARKER if marker is None else str(marker)

def get_dpi(cfg: Dict[str, Any], name: str = "length_dpi") -> float:
    """dpi value from the config; falls back to 300 for missing/bad/non-positive entries."""
    try:
        value = float(cfg.get(name, DEFAULT_DPI))
    except (TypeError, ValueError):
        return DEFAULT_DPI
    return value if value > 0 else DEFAULT_DPI

def get_charset(cfg: Dict[str, Any]) -> str:
    return str(cfg.get("charset") or DEFAULT_CHARSET)

def get_tracker_height(cfg: Dict[str, Any]) -> int:
    try:
        return int(cfg.get("tracker_height", 0))
    except (TypeError, ValueError):
        return 0
