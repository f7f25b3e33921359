"""Configuration helpers for position profiles and engine options."""

from .options import RatingOptions
from .positions import PositionProfile, get_profile, get_profile_by_key, iter_profiles

__all__ = [
    "PositionProfile",
    "RatingOptions",
    "get_profile",
    "get_profile_by_key",
    "iter_profiles",
]
