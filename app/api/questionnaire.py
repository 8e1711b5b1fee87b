# app/api/questionnaire.py
from fastapi import APIRouter, HTTPException, Depends, status
from typing import Any, Dict
import logging

from pydantic import ValidationError

from app.core.dependencies import (
    get_active_questionnaire_controller,
    get_questionnaire_controller,
)
from app.core.exceptions import MissingIdentity, SubmissionInProgress
from app.models.questionnaire import (
    BaseResponse,
    QuestionnaireInput,
    QuestionnaireSession,
    QuestionnaireView,
    RatedAttribute,
)
from app.services.catalogs import (
    CLIMBING_STYLE_OPTIONS,
    GENERAL_FITNESS_OPTIONS,
    TRAINING_FACILITY_OPTIONS,
    option_menus,
    select_options,
)
from app.services.questionnaire_controller import QuestionnaireController

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/questionnaire", tags=["Questionnaire"])

# -------------------- helpers: input -> session fields --------------------

# Input fields copied onto the session as-is
_PLAIN_FIELDS = (
    "name",
    "height",
    "weight",
    "age",
    "current_climbing_grade",
    "max_boulder_grade",
    "goal",
    "training_experience_years",
    "indoor_vs_outdoor",
    "redpointing_experience",
    "injury_history",
    "selected_sleep_hour",
    "work_life_balance",
    "motivation_level",
    "access_to_coaches",
    "time_for_cross_training",
    "additional_notes",
)


def _changes_from_input(session: QuestionnaireSession, data: QuestionnaireInput) -> Dict[str, Any]:
    sent = data.model_dump(exclude_unset=True)
    changes: Dict[str, Any] = {
        field: sent[field]
        for field in _PLAIN_FIELDS
        if field in sent and sent[field] is not None
    }

    if sent.get("ratings") is not None:
        ratings = sent["ratings"]
        unknown = set(ratings) - {a.name for a in session.rated_attributes}
        if unknown:
            raise ValueError(f"Unknown attributes: {sorted(unknown)}")
        changes["rated_attributes"] = [
            RatedAttribute(name=a.name, rating=ratings.get(a.name, a.rating))
            for a in session.rated_attributes
        ]

    if sent.get("climbing_styles") is not None:
        changes["selected_climbing_styles"] = select_options(CLIMBING_STYLE_OPTIONS, sent["climbing_styles"])

    if sent.get("training_facilities") is not None:
        changes["selected_training_facilities"] = select_options(
            TRAINING_FACILITY_OPTIONS, sent["training_facilities"]
        )

    if "general_fitness" in sent:
        # single-select: choosing a level replaces the previous one
        level = sent["general_fitness"]
        changes["selected_general_fitness"] = select_options(GENERAL_FITNESS_OPTIONS, [level] if level else [])

    return changes


def _submitting_conflict(error: SubmissionInProgress) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=error.user_message)


def _view(controller: QuestionnaireController) -> QuestionnaireView:
    pages = controller.pages
    return QuestionnaireView(
        session=controller.session,
        page_title=pages.current_title,
        page_count=pages.page_count,
        progress_label=pages.progress_label,
        progress=pages.progress,
        can_advance=pages.can_advance,
        can_retreat=pages.can_retreat,
        submit_enabled=controller.submit_enabled,
        options=option_menus(),
    )

# ------------------------------ routes --------------------------------------

@router.post("/session", response_model=QuestionnaireView)
async def start_questionnaire(
    controller: QuestionnaireController = Depends(get_questionnaire_controller),
):
    """Present the questionnaire: refresh the profile and load the saved answers."""
    await controller.activate()
    logger.info(f"Questionnaire started for {controller.user_email}")
    return _view(controller)


@router.get("/session", response_model=QuestionnaireView)
async def get_questionnaire(
    controller: QuestionnaireController = Depends(get_active_questionnaire_controller),
):
    return _view(controller)


@router.patch("/session", response_model=QuestionnaireView)
async def update_questionnaire(
    data: QuestionnaireInput,
    controller: QuestionnaireController = Depends(get_active_questionnaire_controller),
):
    """Apply answers typed or picked by the user."""
    try:
        changes = _changes_from_input(controller.session, data)
        await controller.update(changes)
    except SubmissionInProgress as e:
        raise _submitting_conflict(e)
    except (ValidationError, ValueError) as e:
        logger.warning(f"Rejected questionnaire input for {controller.user_email}: {e}")
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    return _view(controller)


@router.post("/session/advance", response_model=QuestionnaireView)
async def advance_page(
    controller: QuestionnaireController = Depends(get_active_questionnaire_controller),
):
    # a gated advance is a no-op; can_advance in the view tells the client why
    try:
        await controller.advance()
    except SubmissionInProgress as e:
        raise _submitting_conflict(e)
    return _view(controller)


@router.post("/session/retreat", response_model=QuestionnaireView)
async def retreat_page(
    controller: QuestionnaireController = Depends(get_active_questionnaire_controller),
):
    try:
        await controller.retreat()
    except SubmissionInProgress as e:
        raise _submitting_conflict(e)
    return _view(controller)


@router.post("/session/submit", response_model=BaseResponse)
async def submit_questionnaire(
    controller: QuestionnaireController = Depends(get_active_questionnaire_controller),
):
    result = await controller.submit()
    if result:
        return BaseResponse(success=True, message=result.message, data=result.data)

    if isinstance(result.error, SubmissionInProgress):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=result.message)
    if isinstance(result.error, MissingIdentity):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.message)
    raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=result.message)


@router.post("/complete-later", response_model=BaseResponse)
async def complete_later(
    controller: QuestionnaireController = Depends(get_questionnaire_controller),
):
    """Hide the questionnaire prompt; it stays available from Settings."""
    await controller.complete_later()
    return BaseResponse(success=True, message="Questionnaire postponed")


@router.delete("/session", response_model=BaseResponse)
async def dismiss_questionnaire(
    controller: QuestionnaireController = Depends(get_questionnaire_controller),
):
    await controller.dismiss()
    return BaseResponse(success=True, message="Questionnaire closed")
