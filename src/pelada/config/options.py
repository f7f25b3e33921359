"""Engine switches and their environment overrides."""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, replace
from typing import Any, Mapping

logger = logging.getLogger(__name__)

_STRICT_POSITION_ENV = "PELADA_STRICT_POSITION"
_SHOOTOUT_WINS_ENV = "PELADA_SHOOTOUT_WINS"
_WRITE_RETRIES_ENV = "PELADA_WRITE_RETRIES"

_WRITE_RETRIES_DEFAULT = 2
_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    logger.warning("Invalid boolean for %s: %s; using default %s", name, raw, default)
    return default


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


def write_retries() -> int:
    return _env_int(_WRITE_RETRIES_ENV, _WRITE_RETRIES_DEFAULT, min_value=0)


@dataclass(frozen=True)
class RatingOptions:
    """Behavioral switches for the rating engine.

    ``strict_position_match`` restricts a player's history to matches where
    the recorded per-match position equals their current position.
    ``count_shootout_wins`` credits the shootout winner of a drawn match with
    a win for VIT. Both default to the behavior of the live league app.
    """

    strict_position_match: bool = False
    count_shootout_wins: bool = False
    default_rating: int = 75
    neutral_attribute: int = 50

    @classmethod
    def from_env(cls, **overrides: Any) -> "RatingOptions":
        options = cls(
            strict_position_match=_env_bool(_STRICT_POSITION_ENV, False),
            count_shootout_wins=_env_bool(_SHOOTOUT_WINS_ENV, False),
        )
        return replace(options, **overrides) if overrides else options

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RatingOptions":
        known = {key: data[key] for key in cls.__dataclass_fields__ if key in data}
        return cls(**known)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
