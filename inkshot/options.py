from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

from .errors import InvalidOption

METHOD_FLOYD_STEINBERG = "floyd-steinberg"
METHOD_ORDERED = "ordered"
METHOD_NONE = "none"

DITHER_METHODS = (METHOD_FLOYD_STEINBERG, METHOD_ORDERED, METHOD_NONE)
BIT_DEPTHS = (1, 2, 4, 8)

DEFAULT_METHOD = METHOD_FLOYD_STEINBERG
DEFAULT_BIT_DEPTH = 4
# Query strings that enable dithering without a usable bit_depth get 2-bit output.
DEFAULT_QUERY_BIT_DEPTH = 2

_KEY_ALIASES = {
    "bitDepth": "bit_depth",
    "gammaCorrection": "gamma_correction",
    "blackLevel": "black_level",
    "whiteLevel": "white_level",
}


@dataclass(frozen=True)
class DitherOptions:
    """Per-call dithering configuration."""

    method: str = DEFAULT_METHOD
    bit_depth: int = DEFAULT_BIT_DEPTH
    gamma_correction: bool = True
    black_level: int = 0
    white_level: int = 100

    def validate(self) -> "DitherOptions":
        """Raise InvalidOption unless every field is within its domain."""
        if self.method not in DITHER_METHODS:
            raise InvalidOption(f"Invalid dithering method: {self.method!r}")
        if not _is_int(self.bit_depth) or self.bit_depth not in BIT_DEPTHS:
            raise InvalidOption(f"Invalid bit depth: {self.bit_depth!r}. Must be 1, 2, 4, or 8")
        for name in ("black_level", "white_level"):
            value = getattr(self, name)
            if not _is_int(value):
                raise InvalidOption(f"{name} must be an integer, got {value!r}")
            if value < 0 or value > 100:
                raise InvalidOption(f"{name} must be between 0 and 100")
        if self.black_level >= self.white_level:
            raise InvalidOption("black_level must be less than white_level")
        return self

    @property
    def levels(self) -> int:
        return 2 ** self.bit_depth

    @property
    def is_identity(self) -> bool:
        return (
            self.method == METHOD_NONE
            and self.bit_depth == 8
            and self.black_level == 0
            and self.white_level == 100
        )

    @property
    def adjusts_levels(self) -> bool:
        return self.black_level > 0 or self.white_level < 100

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, Any]]) -> "DitherOptions":
        """Build validated options from snake_case or camelCase keys."""
        known = {item.name for item in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in (mapping or {}).items():
            name = _KEY_ALIASES.get(key, key)
            if name not in known:
                raise InvalidOption(f"Unknown dithering option: {key!r}")
            if value is None:
                continue
            values[name] = value
        if "gamma_correction" in values:
            values["gamma_correction"] = bool(values["gamma_correction"])
        return cls(**values).validate()


def parse_dither_params(params: Mapping[str, str]) -> Optional[DitherOptions]:
    """Build options from URL query parameters.

    Returns None unless the ``dithering`` flag is present. Unparsable or
    out-of-range numbers fall back to their defaults; the result is still
    validated, so an inverted level range is rejected.
    """
    if "dithering" not in params:
        return None
    bit_depth = parse_int(params.get("bit_depth"))
    if bit_depth not in BIT_DEPTHS:
        bit_depth = DEFAULT_QUERY_BIT_DEPTH
    black_level = parse_int(params.get("black_level"))
    if black_level is None or not 0 <= black_level <= 100:
        black_level = 0
    white_level = parse_int(params.get("white_level"))
    if white_level is None or not 0 <= white_level <= 100:
        white_level = 100
    options = DitherOptions(
        method=params.get("dither_method") or DEFAULT_METHOD,
        bit_depth=bit_depth,
        gamma_correction="no_gamma" not in params,
        black_level=black_level,
        white_level=white_level,
    )
    return options.validate()


def supported_methods() -> Dict[str, Dict[str, Any]]:
    return {
        METHOD_FLOYD_STEINBERG: {
            "description": "Error diffusion dithering - best quality for most images",
            "recommended": True,
            "bit_depths": list(BIT_DEPTHS),
        },
        METHOD_ORDERED: {
            "description": "Pattern-based dithering - faster but can show patterns",
            "recommended": False,
            "bit_depths": list(BIT_DEPTHS),
        },
        METHOD_NONE: {
            "description": "No dithering - simple posterization",
            "recommended": False,
            "bit_depths": list(BIT_DEPTHS),
        },
    }


def parse_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(str(value).strip(), 10)
    except ValueError:
        return None


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
