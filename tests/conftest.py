# tests/conftest.py
import asyncio
import os
from typing import Dict, List, Optional

import pytest

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from app.models.questionnaire import QuestionnaireSession
from app.models.user import UserProfileData


class FakeProfileStore:
    def __init__(self, profile: Optional[UserProfileData] = None, fetched: Optional[UserProfileData] = None):
        self._profile = profile
        self.fetched = fetched
        self.fetch_calls: List[str] = []
        self.replaced: List[UserProfileData] = []

    @property
    def current_profile(self):
        return self._profile

    async def fetch_profile(self, email):
        self.fetch_calls.append(email)
        if self.fetched is not None:
            self._profile = self.fetched
        return self.fetched

    def replace_profile(self, profile):
        self.replaced.append(profile)
        self._profile = profile


class FakeSubmissionService:
    def __init__(self, result: bool = True):
        self.result = result
        self.calls: List[Dict[str, str]] = []
        self.gate: Optional[asyncio.Event] = None

    async def submit(self, answers):
        self.calls.append(dict(answers))
        if self.gate is not None:
            await self.gate.wait()
        return self.result


class FakeFlagStore:
    def __init__(self, needs: bool = True, show: bool = True, events: Optional[list] = None):
        self.needs = needs
        self.show = show
        self.events = events if events is not None else []

    async def get_needs_questionnaire(self):
        return self.needs

    async def set_needs_questionnaire(self, value):
        self.events.append(("needs_questionnaire", value))
        self.needs = value

    async def get_show_questionnaire_prompt(self):
        return self.show

    async def set_show_questionnaire_prompt(self, value):
        self.events.append(("show_questionnaire_prompt", value))
        self.show = value


class FakeSessionStore:
    def __init__(self):
        self.sessions: Dict[str, str] = {}
        self.saves = 0

    async def load(self, email):
        raw = self.sessions.get(email)
        return QuestionnaireSession.model_validate_json(raw) if raw else None

    async def save(self, email, session, only_if_exists=False):
        if only_if_exists and email not in self.sessions:
            return
        self.saves += 1
        self.sessions[email] = session.model_dump_json()

    async def delete(self, email):
        self.sessions.pop(email, None)


class FakeRedis:
    """Just enough of redis.asyncio.Redis (decode_responses=True) for the stores."""

    def __init__(self):
        self.data: Dict[str, str] = {}
        self.expiry: Dict[str, int] = {}

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value, ex=None, xx=False):
        if xx and key not in self.data:
            return None
        self.data[key] = value
        if ex is not None:
            self.expiry[key] = ex
        return True

    async def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
            self.expiry.pop(key, None)
        return removed


def make_profile(**overrides) -> UserProfileData:
    fields = dict(
        email="alex@example.com",
        name="Alex Honnold",
        current_climbing_grade="7a",
        max_boulder_grade="V5",
        goal="7c",
        training_experience="3 years",
        attribute_ratings="",
        perceived_strengths="",
        perceived_weaknesses="",
        training_facilities="Fingerboard, Campus Board",
        general_fitness="Good",
        preferred_climbing_style="Slab, Roof",
        injury_history="Finger tweak 2023",
        indoor_vs_outdoor="Mostly outdoor",
        additional_notes="",
        height="180 cm",
        weight="72 kg",
        age="35 yrs",
        redpointing_experience="High",
        sleep_recovery="7 hours",
        work_life_balance="Flexible/None",
        motivation_level="Very High",
        access_to_coaches="Yes",
        time_for_cross_training="2h per week",
    )
    fields.update(overrides)
    return UserProfileData(**fields)


@pytest.fixture
def profile():
    return make_profile()


@pytest.fixture
def flag_store():
    return FakeFlagStore()


@pytest.fixture
def session_store():
    return FakeSessionStore()


@pytest.fixture
def fake_redis():
    return FakeRedis()
