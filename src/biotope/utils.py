from __future__ import annotations


def indent(level: int) -> str:
    return "  " * level


def clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, value))
