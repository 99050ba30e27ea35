"""Colour value parsing."""

from __future__ import annotations

RGBA = tuple[float, float, float, float]


def parse_hex_color(raw: str) -> RGBA:
    """Parse ``#rgb``, ``#rgba``, ``#rrggbb`` or ``#rrggbbaa`` into float RGBA."""
    normalized = raw.strip().lower()
    if not normalized.startswith("#"):
        raise ValueError(f"unsupported color value: {raw!r}")
    value = normalized.removeprefix("#")
    if len(value) in (3, 4):
        value = "".join(ch * 2 for ch in value)
    if len(value) == 6:
        value = f"{value}ff"
    if len(value) != 8:
        raise ValueError(f"unsupported color value: {raw!r}")
    try:
        channels = tuple(int(value[index:index + 2], 16) for index in range(0, 8, 2))
    except ValueError as exc:
        raise ValueError(f"unsupported color value: {raw!r}") from exc
    return (
        float(channels[0]) / 255.0,
        float(channels[1]) / 255.0,
        float(channels[2]) / 255.0,
        float(channels[3]) / 255.0,
    )


__all__ = ["RGBA", "parse_hex_color"]
