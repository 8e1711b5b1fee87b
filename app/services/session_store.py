# services/session_store.py
import logging
from typing import Optional

from pydantic import ValidationError
from redis.asyncio import Redis

from app.core.config import QUESTIONNAIRE_SESSION_TTL
from app.models.questionnaire import QuestionnaireSession

logger = logging.getLogger(__name__)


class RedisSessionStore:
    """In-progress questionnaire sessions, one per user, expiring after a TTL."""

    def __init__(self, redis: Redis, ttl: int = QUESTIONNAIRE_SESSION_TTL):
        self.redis = redis
        self.ttl = ttl

    @staticmethod
    def _key(email: str) -> str:
        return f"questionnaire_session:{email.lower()}"

    async def load(self, email: str) -> Optional[QuestionnaireSession]:
        raw = await self.redis.get(self._key(email))
        if raw is None:
            return None
        try:
            return QuestionnaireSession.model_validate_json(raw)
        except ValidationError as e:
            # a stale shape from an older release; start over
            logger.warning(f"Dropping unreadable questionnaire session for {email}: {e}")
            await self.delete(email)
            return None

    async def save(
        self, email: str, session: QuestionnaireSession, only_if_exists: bool = False
    ) -> None:
        # xx: never bring back a session another request has dismissed
        stored = await self.redis.set(
            self._key(email),
            session.model_dump_json(),
            ex=self.ttl,
            xx=only_if_exists,
        )
        if only_if_exists and not stored:
            logger.info(f"Questionnaire session for {email} was closed, not saving it again")

    async def delete(self, email: str) -> None:
        await self.redis.delete(self._key(email))
