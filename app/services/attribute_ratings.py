# services/attribute_ratings.py
"""
Attribute ratings come in two shapes:

  - numeric (current): attribute_ratings = "Crimp Strength: 4, Power: 5, ..."
  - legacy:            perceived_strengths = "Power, Core Strength"
                       perceived_weaknesses = "Endurance"

Both are still written on every submit so older readers keep working, and
`resolve_ratings` decides which one a stored profile is read from.
"""
import logging
from enum import Enum
from typing import Dict, List, Optional, Tuple

from app.core.exceptions import MalformedLegacyData
from app.models.questionnaire import (
    ATTRIBUTES_TO_RATE,
    DEFAULT_RATING,
    RatedAttribute,
    clamp_rating,
)
from app.models.user import UserProfileData

logger = logging.getLogger(__name__)

STRENGTH_RATING = 4
WEAKNESS_RATING = 2


class RatingSource(str, Enum):
    NUMERIC = "numeric"
    LEGACY = "legacy"
    NONE = "none"


# -------------------- serialize --------------------

def serialize_attribute_ratings(attrs: List[RatedAttribute]) -> str:
    return ", ".join(f"{a.name}: {a.rating}" for a in attrs)


def derive_strengths(attrs: List[RatedAttribute]) -> str:
    return ", ".join(a.name for a in attrs if a.rating >= STRENGTH_RATING)


def derive_weaknesses(attrs: List[RatedAttribute]) -> str:
    return ", ".join(a.name for a in attrs if a.rating <= WEAKNESS_RATING)


# -------------------- parse --------------------

def split_name_list(s: str) -> List[str]:
    """'Power, Core Strength,' -> ['Power', 'Core Strength']"""
    if not s:
        return []
    return [part.strip() for part in s.split(",") if part.strip()]


def _parse_rating_entry(entry: str) -> Tuple[str, int]:
    name, sep, value = entry.partition(":")
    name = name.strip()
    value = value.strip()
    if not sep or not name:
        raise MalformedLegacyData(f"expected '<name>: <rating>', got {entry!r}")
    try:
        rating = int(value)
    except ValueError:
        raise MalformedLegacyData(f"rating is not a whole number in {entry!r}")
    return name, clamp_rating(rating)


def parse_attribute_ratings(s: str) -> Dict[str, int]:
    """
    "Crimp Strength: 4, Power: 9" -> {"Crimp Strength": 4, "Power": 5}

    Never raises: entries that are not "<name>: <int>" are skipped so a bad
    legacy row cannot stop the questionnaire from loading.
    """
    out: Dict[str, int] = {}
    if not s:
        return out
    for entry in s.split(","):
        if not entry.strip():
            continue
        try:
            name, rating = _parse_rating_entry(entry)
        except MalformedLegacyData as e:
            logger.debug(f"Skipping attribute rating entry: {e}")
            continue
        out[name] = rating
    return out


# -------------------- precedence --------------------

def rating_source(profile: Optional[UserProfileData]) -> RatingSource:
    if profile is None:
        return RatingSource.NONE
    if profile.attribute_ratings:
        return RatingSource.NUMERIC
    if profile.perceived_strengths or profile.perceived_weaknesses:
        return RatingSource.LEGACY
    return RatingSource.NONE


def _legacy_ratings(strengths: str, weaknesses: str) -> Dict[str, int]:
    strong = split_name_list(strengths)
    weak = split_name_list(weaknesses)
    out: Dict[str, int] = {}
    for name in ATTRIBUTES_TO_RATE:
        if name in strong:
            out[name] = STRENGTH_RATING
        elif name in weak:
            out[name] = WEAKNESS_RATING
        else:
            out[name] = DEFAULT_RATING
    return out


def resolve_ratings(profile: Optional[UserProfileData]) -> Dict[str, int]:
    """
    Canonical attribute -> rating mapping for a stored profile.

    Numeric ratings win whenever present; attributes they do not mention are
    absent from the result. The legacy lists are only consulted when there are
    no numeric ratings, and then cover every attribute (unlisted ones get 3).
    An empty result means "keep whatever the session already has".
    """
    source = rating_source(profile)
    if source is RatingSource.NUMERIC:
        parsed = parse_attribute_ratings(profile.attribute_ratings)
        unknown = sorted(set(parsed) - set(ATTRIBUTES_TO_RATE))
        if unknown:
            logger.debug(f"Ignoring ratings for unknown attributes: {unknown}")
        return {name: rating for name, rating in parsed.items() if name in ATTRIBUTES_TO_RATE}
    if source is RatingSource.LEGACY:
        return _legacy_ratings(profile.perceived_strengths, profile.perceived_weaknesses)
    return {}


def apply_ratings(attrs: List[RatedAttribute], ratings: Dict[str, int]) -> List[RatedAttribute]:
    """New attribute list with every mapped rating applied; the rest are copied as-is."""
    return [
        RatedAttribute(name=a.name, rating=ratings.get(a.name, a.rating))
        for a in attrs
    ]
