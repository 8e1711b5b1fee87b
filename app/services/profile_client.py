# services/profile_client.py
"""
HTTP side of the questionnaire: the profile store and the answer submission
service, both talking to the backend's /users/profile/{email} endpoints.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from app.core.config import PROFILE_API_BASE_URL, PROFILE_API_TIMEOUT
from app.models.questionnaire import AnswerPayload
from app.models.user import UserProfileData
from app.services.collaborators import FlagStore

logger = logging.getLogger(__name__)


class ProfileApiClient:
    """Thin authenticated wrapper around an httpx.AsyncClient."""

    def __init__(
        self,
        access_token: Optional[str] = None,
        base_url: str = PROFILE_API_BASE_URL,
        timeout: float = PROFILE_API_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {"Accept": "application/json"}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def get_profile(self, email: str) -> httpx.Response:
        return await self._client.get(f"/users/profile/{email}")

    async def put_profile(self, email: str, body: Dict[str, Any]) -> httpx.Response:
        return await self._client.put(f"/users/profile/{email}", json=body)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()


class HttpProfileStore:
    """
    Profile cache backed by GET /users/profile/{email}.

    A fetch also keeps the questionnaire flags honest: a missing profile means
    the questionnaire is needed (and should be prompted), a complete one means
    the prompt can go away.
    """

    def __init__(
        self,
        client: ProfileApiClient,
        flag_store: Optional[FlagStore] = None,
        profile: Optional[UserProfileData] = None,
    ):
        self.client = client
        self.flag_store = flag_store
        self._profile = profile

    @property
    def current_profile(self) -> Optional[UserProfileData]:
        return self._profile

    def replace_profile(self, profile: UserProfileData) -> None:
        self._profile = profile

    async def fetch_profile(self, email: str) -> Optional[UserProfileData]:
        try:
            response = await self.client.get_profile(email)
        except httpx.HTTPError as e:
            logger.error(f"fetch_profile error for {email}: {e}")
            return None

        if response.status_code == 403:
            logger.error(f"❌ Forbidden: not authorized to access profile {email}")
            return None

        if response.status_code == 404:
            logger.info(f"ℹ️ No profile found for {email}, treating as empty profile")
            self._profile = UserProfileData(email=email)
            if self.flag_store is not None:
                await self.flag_store.set_needs_questionnaire(True)
                await self.flag_store.set_show_questionnaire_prompt(True)
            return self._profile

        if response.status_code != 200:
            logger.error(f"❌ Unexpected status fetching profile {email}: {response.status_code}")
            return None

        try:
            data = response.json()
        except ValueError:
            logger.error(f"❌ Profile response for {email} was not JSON")
            return None
        if not isinstance(data, dict):
            logger.error(f"❌ Profile response for {email} was not an object")
            return None

        profile = UserProfileData(**{**data, "email": email})
        self._profile = profile

        if self.flag_store is not None:
            complete = profile.has_basic_answers
            await self.flag_store.set_needs_questionnaire(not complete)
            if complete:
                await self.flag_store.set_show_questionnaire_prompt(False)

        return profile


class HttpAnswerSubmissionService:
    """PUT /users/profile/{email}. Saved only on a 200 with a JSON object body."""

    def __init__(self, client: ProfileApiClient, profile_store: HttpProfileStore):
        self.client = client
        self.profile_store = profile_store

    async def submit(self, answers: AnswerPayload) -> bool:
        profile = self.profile_store.current_profile
        email = profile.email if profile is not None else None
        if not email:
            logger.error("Cannot submit answers without a profile email")
            return False

        body = dict(answers)
        if "name" not in body and profile.name:
            body["name"] = profile.name

        try:
            response = await self.client.put_profile(email, body)
        except httpx.HTTPError as e:
            logger.error(f"Error updating user profile {email}: {e}")
            return False

        if response.status_code != 200:
            logger.error(f"❌ Profile update for {email} returned {response.status_code}")
            return False

        try:
            data = response.json()
        except ValueError:
            logger.error(f"❌ Profile update for {email} returned a non-JSON body")
            return False
        return isinstance(data, dict)
