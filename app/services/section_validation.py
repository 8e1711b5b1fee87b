# services/section_validation.py
"""
The only two gates in the questionnaire. Neither raises: the caller keeps
the matching action disabled while a gate is closed.
"""
from app.models.questionnaire import QuestionnaireSession


def is_section1_valid(session: QuestionnaireSession) -> bool:
    # emptiness only, no trimming and no email format check
    return session.name != "" and session.email != ""


def is_submit_enabled(session: QuestionnaireSession) -> bool:
    """Only save when complete, and never twice at once."""
    return (
        bool(session.current_climbing_grade.strip())
        and bool(session.max_boulder_grade.strip())
        and bool(session.goal.strip())
        and not session.is_submitting
    )
