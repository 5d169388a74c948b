"""Endpoint feature modules; each exposes register(registry)."""

from __future__ import annotations

from . import audio, system, video

FEATURE_MODULES = (video, audio, system)

__all__ = ["FEATURE_MODULES"]
