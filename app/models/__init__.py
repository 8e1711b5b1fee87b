# models/__init__.py
"""
Pydantic models for the questionnaire session, the stored profile and the API
"""

from .user import UserProfileData

from .questionnaire import (
    ANSWER_KEYS,
    ATTRIBUTES_TO_RATE,
    SECTION_TITLES,
    AnswerPayload,
    RatedAttribute,
    SelectableOption,
    QuestionnaireSession,
    QuestionnaireInput,
    QuestionnaireView,
    BaseResponse,
)

__all__ = [
    # User
    "UserProfileData",

    # Questionnaire
    "ANSWER_KEYS",
    "ATTRIBUTES_TO_RATE",
    "SECTION_TITLES",
    "AnswerPayload",
    "RatedAttribute",
    "SelectableOption",
    "QuestionnaireSession",

    # API
    "QuestionnaireInput",
    "QuestionnaireView",
    "BaseResponse",
]
