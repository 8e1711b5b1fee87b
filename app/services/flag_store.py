# services/flag_store.py
import logging

from redis.asyncio import Redis

logger = logging.getLogger(__name__)

NEEDS_QUESTIONNAIRE = "needs_questionnaire"
SHOW_QUESTIONNAIRE_PROMPT = "show_questionnaire_prompt"


class RedisFlagStore:
    """Per-user questionnaire flags, stored as "1"/"0" under questionnaire:{email}:<flag>."""

    def __init__(self, redis: Redis, email: str):
        self.redis = redis
        self.email = email.lower()

    def _key(self, flag: str) -> str:
        return f"questionnaire:{self.email}:{flag}"

    async def _get(self, flag: str) -> bool:
        value = await self.redis.get(self._key(flag))
        return value in ("1", b"1")

    async def _set(self, flag: str, value: bool) -> None:
        logger.debug(f"{self.email}: {flag} -> {value}")
        await self.redis.set(self._key(flag), "1" if value else "0")

    async def get_needs_questionnaire(self) -> bool:
        return await self._get(NEEDS_QUESTIONNAIRE)

    async def set_needs_questionnaire(self, value: bool) -> None:
        await self._set(NEEDS_QUESTIONNAIRE, value)

    async def get_show_questionnaire_prompt(self) -> bool:
        return await self._get(SHOW_QUESTIONNAIRE_PROMPT)

    async def set_show_questionnaire_prompt(self, value: bool) -> None:
        await self._set(SHOW_QUESTIONNAIRE_PROMPT, value)
