# services/collaborators.py
"""
What the questionnaire controller needs from the outside world. The HTTP and
Redis backed implementations live in profile_client, flag_store and
session_store.
"""
from typing import Optional, Protocol

from app.models.questionnaire import AnswerPayload, QuestionnaireSession
from app.models.user import UserProfileData


class ProfileStore(Protocol):
    @property
    def current_profile(self) -> Optional[UserProfileData]:
        """Locally cached profile, if any."""

    async def fetch_profile(self, email: str) -> Optional[UserProfileData]:
        """Refresh the cached profile. None on failure (cache left as it was)."""

    def replace_profile(self, profile: UserProfileData) -> None:
        """Overwrite the cached profile without a round trip."""


class AnswerSubmissionService(Protocol):
    async def submit(self, answers: AnswerPayload) -> bool:
        """All or nothing: True only when every answer was saved."""


class FlagStore(Protocol):
    async def get_needs_questionnaire(self) -> bool: ...

    async def set_needs_questionnaire(self, value: bool) -> None: ...

    async def get_show_questionnaire_prompt(self) -> bool: ...

    async def set_show_questionnaire_prompt(self, value: bool) -> None: ...


class SessionStore(Protocol):
    async def load(self, email: str) -> Optional[QuestionnaireSession]: ...

    async def save(
        self, email: str, session: QuestionnaireSession, only_if_exists: bool = False
    ) -> None:
        """With only_if_exists, a session deleted in the meantime stays deleted."""

    async def delete(self, email: str) -> None: ...
