# services/profile_mapper.py
"""
Stored profile <-> questionnaire session <-> flat answer payload.
"""
import logging
from typing import List, Optional

from app.models.questionnaire import (
    ANSWER_KEYS,
    AnswerPayload,
    DEFAULT_ACCESS_TO_COACHES,
    DEFAULT_AGE,
    DEFAULT_CROSS_TRAINING,
    DEFAULT_HEIGHT,
    DEFAULT_MOTIVATION,
    DEFAULT_REDPOINTING,
    DEFAULT_WEIGHT,
    DEFAULT_WORK_LIFE_BALANCE,
    QuestionnaireSession,
    SelectableOption,
)
from app.models.user import UserProfileData
from app.services.attribute_ratings import (
    apply_ratings,
    derive_strengths,
    derive_weaknesses,
    resolve_ratings,
    serialize_attribute_ratings,
    split_name_list,
)
from app.services.catalogs import (
    CLIMBING_STYLE_OPTIONS,
    GENERAL_FITNESS_OPTIONS,
    TRAINING_FACILITY_OPTIONS,
    select_options,
)

logger = logging.getLogger(__name__)


# ------------------------------ helpers ------------------------------------

def _or_default(value: str, default: str) -> str:
    return value if value else default


def parse_selection(s: str, catalog: List[SelectableOption]) -> List[SelectableOption]:
    """'Slab, Roof, Made Up' -> [Slab, Roof]. Matching is exact and case-sensitive."""
    return select_options(catalog, split_name_list(s))


def join_selection(options: List[SelectableOption]) -> str:
    return ", ".join(o.name for o in options)


def parse_training_years(s: str) -> int:
    """'3 years' -> 3; no digits at all -> 0."""
    digits = "".join(ch for ch in s if ch.isdigit())
    return int(digits) if digits else 0


def parse_sleep_hour(s: str) -> Optional[str]:
    """'8 hours' -> '8'. None when there is nothing to take."""
    parts = s.split()
    return parts[0] if parts else None


# ------------------------------ profile -> session ---------------------------

def hydrate(session: QuestionnaireSession, profile: Optional[UserProfileData]) -> QuestionnaireSession:
    """
    Copy a stored profile into a session, returning the new session.

    With no profile the session comes back unchanged. Empty stored values for
    the picker-backed fields fall back to the picker defaults.
    """
    if profile is None:
        logger.debug("No profile held, questionnaire keeps its defaults")
        return session.model_copy(deep=True)

    s = session.model_copy(deep=True)

    # Section 1
    s.name = profile.name
    s.email = profile.email or ""
    s.height = _or_default(profile.height, DEFAULT_HEIGHT)
    s.weight = _or_default(profile.weight, DEFAULT_WEIGHT)
    s.age = _or_default(profile.age, DEFAULT_AGE)

    # Section 2
    s.current_climbing_grade = profile.current_climbing_grade
    s.max_boulder_grade = profile.max_boulder_grade
    s.goal = profile.goal
    s.training_experience_years = parse_training_years(profile.training_experience)
    s.indoor_vs_outdoor = profile.indoor_vs_outdoor
    s.redpointing_experience = _or_default(profile.redpointing_experience, DEFAULT_REDPOINTING)

    # Section 3
    s.rated_attributes = apply_ratings(s.rated_attributes, resolve_ratings(profile))
    s.selected_climbing_styles = parse_selection(profile.preferred_climbing_style, CLIMBING_STYLE_OPTIONS)

    # Section 4
    s.selected_training_facilities = parse_selection(profile.training_facilities, TRAINING_FACILITY_OPTIONS)
    s.injury_history = profile.injury_history

    # Section 5
    s.selected_general_fitness = parse_selection(profile.general_fitness, GENERAL_FITNESS_OPTIONS)
    if profile.sleep_recovery:
        hour = parse_sleep_hour(profile.sleep_recovery)
        if hour is not None:
            s.selected_sleep_hour = hour
    s.work_life_balance = _or_default(profile.work_life_balance, DEFAULT_WORK_LIFE_BALANCE)
    s.motivation_level = _or_default(profile.motivation_level, DEFAULT_MOTIVATION)

    # Section 6
    s.access_to_coaches = _or_default(profile.access_to_coaches, DEFAULT_ACCESS_TO_COACHES)
    s.time_for_cross_training = _or_default(profile.time_for_cross_training, DEFAULT_CROSS_TRAINING)
    s.additional_notes = profile.additional_notes

    return s


# ------------------------------ session -> payload ---------------------------

def serialize(session: QuestionnaireSession, email: Optional[str] = None) -> AnswerPayload:
    """
    Flatten a session into the answer payload. Every key in ANSWER_KEYS is
    present. `email` is the signed-in identity and wins over the session copy.
    """
    attrs = session.rated_attributes
    answers: AnswerPayload = {
        "name": session.name,
        "email": email if email is not None else session.email,
        "current_climbing_grade": session.current_climbing_grade,
        "max_boulder_grade": session.max_boulder_grade,
        "goal": session.goal,
        "training_experience": str(session.training_experience_years),

        # Backward-compatibility fields
        "perceived_strengths": derive_strengths(attrs),
        "perceived_weaknesses": derive_weaknesses(attrs),
        "attribute_ratings": serialize_attribute_ratings(attrs),

        "training_facilities": join_selection(session.selected_training_facilities),
        "general_fitness": join_selection(session.selected_general_fitness),
        "injury_history": session.injury_history,

        "height": session.height,
        "weight": session.weight,
        "age": session.age,

        "preferred_climbing_style": join_selection(session.selected_climbing_styles),
        "indoor_vs_outdoor": session.indoor_vs_outdoor,
        "redpointing_experience": session.redpointing_experience,
        "sleep_recovery": f"{session.selected_sleep_hour} hours",
        "work_life_balance": session.work_life_balance,
        "motivation_level": session.motivation_level,
        "access_to_coaches": session.access_to_coaches,
        "time_for_cross_training": session.time_for_cross_training,

        "additional_notes": session.additional_notes,
    }
    return {key: answers[key] for key in ANSWER_KEYS}


# ------------------------------ payload -> profile ---------------------------

def apply_answers(profile: UserProfileData, answers: AnswerPayload) -> UserProfileData:
    """
    Profile as it will look after a successful save, without re-fetching.
    The email answer is the identity and never overwrites the profile's.
    """
    updates = {
        key: value
        for key, value in answers.items()
        if key != "email" and key in UserProfileData.model_fields
    }
    return profile.model_copy(update=updates)
