"""RGB and HSV colours and the per-channel blend operations used by the compositor."""

from __future__ import annotations

from dataclasses import dataclass


def _check_byte(name: str, value: int) -> None:
    if not 0 <= value <= 255:
        raise ValueError(f"{name} must be within 0..255, got {value}")


@dataclass(frozen=True)
class RGB:
    """An 8-bit-per-channel colour."""

    r: int = 0
    g: int = 0
    b: int = 0

    def __post_init__(self) -> None:
        _check_byte("r", self.r)
        _check_byte("g", self.g)
        _check_byte("b", self.b)

    @classmethod
    def black(cls) -> RGB:
        return cls(0, 0, 0)

    @classmethod
    def white(cls) -> RGB:
        return cls(255, 255, 255)


@dataclass(frozen=True)
class HSV:
    """A colour as hue (0-359), saturation (0-255) and value (0-255)."""

    h: int = 0
    s: int = 0
    v: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.h <= 359:
            raise ValueError(f"h must be within 0..359, got {self.h}")
        _check_byte("s", self.s)
        _check_byte("v", self.v)


def hsv_to_rgb(hsv: HSV) -> RGB:
    """Convert with integer arithmetic, six 60-degree regions."""
    h, s, v = hsv.h, hsv.s, hsv.v
    if s == 0:
        return RGB(v, v, v)

    region = h // 60
    remainder = (h - region * 60) * 255 // 60

    p = v * (255 - s) // 255
    q = v * (255 - s * remainder // 255) // 255
    t = v * (255 - s * (255 - remainder) // 255) // 255

    if region == 0:
        return RGB(v, t, p)
    if region == 1:
        return RGB(q, v, p)
    if region == 2:
        return RGB(p, v, t)
    if region == 3:
        return RGB(p, q, v)
    if region == 4:
        return RGB(t, p, v)
    return RGB(v, p, q)


def rgb_multiply(base: RGB, overlay: RGB) -> RGB:
    return RGB(
        base.r * overlay.r // 255,
        base.g * overlay.g // 255,
        base.b * overlay.b // 255,
    )


def rgb_add(base: RGB, overlay: RGB) -> RGB:
    return RGB(
        min(base.r + overlay.r, 255),
        min(base.g + overlay.g, 255),
        min(base.b + overlay.b, 255),
    )


def rgb_subtract(base: RGB, overlay: RGB) -> RGB:
    return RGB(
        max(base.r - overlay.r, 0),
        max(base.g - overlay.g, 0),
        max(base.b - overlay.b, 0),
    )


def rgb_min(a: RGB, b: RGB) -> RGB:
    return RGB(min(a.r, b.r), min(a.g, b.g), min(a.b, b.b))


def rgb_max(a: RGB, b: RGB) -> RGB:
    return RGB(max(a.r, b.r), max(a.g, b.g), max(a.b, b.b))


def rgb_overwrite(base: RGB, overlay: RGB) -> RGB:
    """Overlay wins unless it is black, which counts as transparent."""
    return base if overlay == RGB.black() else overlay