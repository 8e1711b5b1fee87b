# models/questionnaire.py
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

MIN_RATING = 1
MAX_RATING = 5
DEFAULT_RATING = 3

# Abilities rated 1 (weakness) to 5 (strength), in display order
ATTRIBUTES_TO_RATE = [
    "Crimp Strength",
    "Pinch Strength",
    "Pocket Strength",
    "Strength",
    "Power",
    "Power Endurance",
    "Endurance",
    "Upper Body Strength",
    "Core Strength",
    "Flexibility",
    "Mental Strength",
]

SECTION_TITLES = [
    "Personal Info",
    "Climbing Experience",
    "Abilities & Style",
    "Training Setup",
    "Health & Recovery",
    "Additional Info",
]

# Shown on first load and whenever the stored value is empty
DEFAULT_HEIGHT = "170 cm"
DEFAULT_WEIGHT = "70 kg"
DEFAULT_AGE = "30 yrs"
DEFAULT_REDPOINTING = "None"
DEFAULT_SLEEP_HOUR = "8"
DEFAULT_WORK_LIFE_BALANCE = "Mostly Desk"
DEFAULT_MOTIVATION = "High"
DEFAULT_ACCESS_TO_COACHES = "No"
DEFAULT_CROSS_TRAINING = "3h per week"

# The flat contract with PUT /users/profile/{email}
ANSWER_KEYS = (
    "name",
    "email",
    "current_climbing_grade",
    "max_boulder_grade",
    "goal",
    "training_experience",
    "perceived_strengths",
    "perceived_weaknesses",
    "attribute_ratings",
    "training_facilities",
    "general_fitness",
    "injury_history",
    "height",
    "weight",
    "age",
    "preferred_climbing_style",
    "indoor_vs_outdoor",
    "redpointing_experience",
    "sleep_recovery",
    "work_life_balance",
    "motivation_level",
    "access_to_coaches",
    "time_for_cross_training",
    "additional_notes",
)

AnswerPayload = Dict[str, str]


def clamp_rating(value: int) -> int:
    return max(MIN_RATING, min(MAX_RATING, int(value)))


class RatedAttribute(BaseModel):
    """A single rated ability (strength/weakness) on a 1-5 scale."""
    model_config = ConfigDict(validate_assignment=True)

    name: str
    rating: int = DEFAULT_RATING

    @field_validator("name")
    @classmethod
    def _known_attribute(cls, value: str) -> str:
        if value not in ATTRIBUTES_TO_RATE:
            raise ValueError(f"Unknown attribute '{value}'")
        return value

    @field_validator("rating")
    @classmethod
    def _clamp(cls, value: int) -> int:
        return clamp_rating(value)


class SelectableOption(BaseModel):
    """One chip in a climbing style, training facility or fitness level grid."""
    model_config = ConfigDict(frozen=True)

    name: str
    category: Optional[str] = None


def default_rated_attributes() -> List[RatedAttribute]:
    return [RatedAttribute(name=name, rating=DEFAULT_RATING) for name in ATTRIBUTES_TO_RATE]


class QuestionnaireSession(BaseModel):
    """
    Working copy of every questionnaire field plus the page index.

    Lives only while the questionnaire is open; it is never written to the
    profile store directly, only through the answer payload on submit.
    """
    model_config = ConfigDict(validate_assignment=True)

    # Section 1: Personal Information
    name: str = ""
    email: str = ""
    height: str = DEFAULT_HEIGHT
    weight: str = DEFAULT_WEIGHT
    age: str = DEFAULT_AGE

    # Section 2: Climbing Experience
    current_climbing_grade: str = ""
    max_boulder_grade: str = ""
    goal: str = ""
    training_experience_years: int = Field(default=0, ge=0)
    indoor_vs_outdoor: str = ""
    redpointing_experience: str = DEFAULT_REDPOINTING

    # Section 3: Abilities & Style
    rated_attributes: List[RatedAttribute] = Field(default_factory=default_rated_attributes)
    selected_climbing_styles: List[SelectableOption] = Field(default_factory=list)

    # Section 4: Training Setup
    selected_training_facilities: List[SelectableOption] = Field(default_factory=list)
    injury_history: str = ""

    # Section 5: Health & Recovery
    selected_general_fitness: List[SelectableOption] = Field(default_factory=list)
    selected_sleep_hour: str = DEFAULT_SLEEP_HOUR
    work_life_balance: str = DEFAULT_WORK_LIFE_BALANCE
    motivation_level: str = DEFAULT_MOTIVATION

    # Section 6: Additional Information
    access_to_coaches: str = DEFAULT_ACCESS_TO_COACHES
    time_for_cross_training: str = DEFAULT_CROSS_TRAINING
    additional_notes: str = ""

    # Flow state
    current_page: int = Field(default=0, ge=0, le=len(SECTION_TITLES) - 1)
    is_submitting: bool = False
    error_message: Optional[str] = None

    @field_validator("rated_attributes")
    @classmethod
    def _unique_attributes(cls, attrs: List[RatedAttribute]) -> List[RatedAttribute]:
        names = [a.name for a in attrs]
        if len(names) != len(set(names)):
            raise ValueError("Each attribute can only be rated once")
        return attrs

    @field_validator(
        "selected_climbing_styles",
        "selected_training_facilities",
        "selected_general_fitness",
    )
    @classmethod
    def _no_duplicate_options(cls, options: List[SelectableOption]) -> List[SelectableOption]:
        seen = set()
        unique = []
        for option in options:
            if option not in seen:
                seen.add(option)
                unique.append(option)
        return unique

    def ratings(self) -> Dict[str, int]:
        return {a.name: a.rating for a in self.rated_attributes}


# ------------------------------ API models ------------------------------

class QuestionnaireInput(BaseModel):
    """
    User input for PATCH /questionnaire/session. Every field is optional;
    only the ones sent are applied. Options are given by name.
    """
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    height: Optional[str] = None
    weight: Optional[str] = None
    age: Optional[str] = None

    current_climbing_grade: Optional[str] = None
    max_boulder_grade: Optional[str] = None
    goal: Optional[str] = None
    training_experience_years: Optional[int] = Field(default=None, ge=0)
    indoor_vs_outdoor: Optional[str] = None
    redpointing_experience: Optional[str] = None

    ratings: Optional[Dict[str, int]] = None
    climbing_styles: Optional[List[str]] = None

    training_facilities: Optional[List[str]] = None
    injury_history: Optional[str] = None

    general_fitness: Optional[str] = None
    selected_sleep_hour: Optional[str] = None
    work_life_balance: Optional[str] = None
    motivation_level: Optional[str] = None

    access_to_coaches: Optional[str] = None
    time_for_cross_training: Optional[str] = None
    additional_notes: Optional[str] = None


class QuestionnaireView(BaseModel):
    """Everything a renderer needs to draw the current page."""
    session: QuestionnaireSession
    page_title: str
    page_count: int
    progress_label: str
    progress: List[bool]
    can_advance: bool
    can_retreat: bool
    submit_enabled: bool
    options: Dict[str, Any]


class BaseResponse(BaseModel):
    success: bool
    message: str
    data: Optional[Any] = None
