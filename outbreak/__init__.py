"""Checkout shim: ``import outbreak`` from the repo root resolves to ``src/outbreak``."""
from __future__ import annotations

from pathlib import Path
from pkgutil import extend_path

__path__ = extend_path(__path__, __name__)

_SOURCE_DIR = Path(__file__).resolve().parents[1] / "src" / __name__
if _SOURCE_DIR.is_dir() and str(_SOURCE_DIR) not in __path__:
    __path__.append(str(_SOURCE_DIR))
