# app/core/dependencies.py

import logging
from typing import AsyncIterator, Optional

from fastapi import Depends, HTTPException, status

from app.core.redis import get_redis
from app.core.security import get_access_token, get_current_user_email
from app.models.questionnaire import QuestionnaireSession
from app.models.user import UserProfileData
from app.services.flag_store import RedisFlagStore
from app.services.profile_client import (
    HttpAnswerSubmissionService,
    HttpProfileStore,
    ProfileApiClient,
)
from app.services.questionnaire_controller import QuestionnaireController
from app.services.session_store import RedisSessionStore

logger = logging.getLogger(__name__)


async def get_profile_api_client(
    token: str = Depends(get_access_token),
) -> AsyncIterator[ProfileApiClient]:
    """FastAPI dependency: a profile API client acting as the caller."""
    client = ProfileApiClient(access_token=token)
    try:
        yield client
    finally:
        await client.aclose()


def get_session_store(redis=Depends(get_redis)) -> RedisSessionStore:
    return RedisSessionStore(redis)


def get_flag_store(
    email: str = Depends(get_current_user_email),
    redis=Depends(get_redis),
) -> RedisFlagStore:
    return RedisFlagStore(redis, email)


def _build_controller(
    email: str,
    client: ProfileApiClient,
    flag_store: RedisFlagStore,
    session_store: RedisSessionStore,
    session: Optional[QuestionnaireSession] = None,
) -> QuestionnaireController:
    # The token identifies the user even before the profile has been fetched
    profile_store = HttpProfileStore(client, flag_store, profile=UserProfileData(email=email))
    return QuestionnaireController(
        profile_store=profile_store,
        submission_service=HttpAnswerSubmissionService(client, profile_store),
        flag_store=flag_store,
        session=session,
        session_store=session_store,
    )


def get_questionnaire_controller(
    email: str = Depends(get_current_user_email),
    client: ProfileApiClient = Depends(get_profile_api_client),
    flag_store: RedisFlagStore = Depends(get_flag_store),
    session_store: RedisSessionStore = Depends(get_session_store),
) -> QuestionnaireController:
    """FastAPI dependency: a controller holding a brand new session."""
    return _build_controller(email, client, flag_store, session_store)


async def get_active_questionnaire_controller(
    email: str = Depends(get_current_user_email),
    client: ProfileApiClient = Depends(get_profile_api_client),
    flag_store: RedisFlagStore = Depends(get_flag_store),
    session_store: RedisSessionStore = Depends(get_session_store),
) -> QuestionnaireController:
    """FastAPI dependency: a controller resumed from the user's stored session."""
    session = await session_store.load(email)
    if session is None:
        logger.info(f"No questionnaire in progress for {email}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No questionnaire in progress",
        )
    return _build_controller(email, client, flag_store, session_store, session)
