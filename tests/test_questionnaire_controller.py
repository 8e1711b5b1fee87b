import asyncio

import pytest

from app.core.exceptions import MissingIdentity, SubmissionFailed, SubmissionInProgress
from app.models.questionnaire import QuestionnaireSession
from app.models.user import UserProfileData
from app.services.questionnaire_controller import QuestionnaireController

from conftest import (
    FakeFlagStore,
    FakeProfileStore,
    FakeSubmissionService,
    make_profile,
)


def make_controller(profile_store=None, service=None, flags=None, **kwargs):
    return QuestionnaireController(
        profile_store=profile_store or FakeProfileStore(),
        submission_service=service or FakeSubmissionService(),
        flag_store=flags or FakeFlagStore(),
        **kwargs,
    )


def ready_session(**overrides):
    fields = dict(
        name="Alex",
        email="alex@example.com",
        current_climbing_grade="7a",
        max_boulder_grade="V5",
        goal="7c",
        current_page=5,
    )
    fields.update(overrides)
    return QuestionnaireSession(**fields)


# ------------------------------ activate -------------------------------------

def test_activate_refreshes_then_hydrates():
    held = UserProfileData(email="alex@example.com")
    fresh = make_profile(goal="8a")
    store = FakeProfileStore(profile=held, fetched=fresh)
    controller = make_controller(profile_store=store)

    session = asyncio.run(controller.activate())

    assert store.fetch_calls == ["alex@example.com"]
    assert session.goal == "8a"
    assert controller.session is session
    assert controller.pages.session is session


def test_activate_without_email_uses_held_profile():
    store = FakeProfileStore(profile=make_profile(email=None, goal="7b"))
    controller = make_controller(profile_store=store)

    session = asyncio.run(controller.activate())

    assert store.fetch_calls == []
    assert session.goal == "7b"


def test_activate_without_any_profile_keeps_defaults():
    controller = make_controller(profile_store=FakeProfileStore())
    session = asyncio.run(controller.activate())
    assert session == QuestionnaireSession()


def test_activate_falls_back_to_cache_when_refresh_fails():
    store = FakeProfileStore(profile=make_profile(goal="7b+"), fetched=None)
    controller = make_controller(profile_store=store)
    session = asyncio.run(controller.activate())
    assert store.fetch_calls == ["alex@example.com"]
    assert session.goal == "7b+"


def test_activate_persists_the_session(session_store):
    store = FakeProfileStore(profile=make_profile(), fetched=make_profile())
    controller = make_controller(profile_store=store, session_store=session_store)
    asyncio.run(controller.activate())
    saved = asyncio.run(session_store.load("alex@example.com"))
    assert saved.goal == "7c"


# ------------------------------ navigation & input ---------------------------

def test_advance_and_retreat_persist(session_store):
    store = FakeProfileStore(profile=make_profile())
    controller = make_controller(profile_store=store, session=ready_session(current_page=0),
                                 session_store=session_store)
    assert asyncio.run(controller.advance()) is True
    assert asyncio.run(session_store.load("alex@example.com")).current_page == 1
    assert asyncio.run(controller.retreat()) is True
    assert asyncio.run(session_store.load("alex@example.com")).current_page == 0


def test_update_applies_and_validates():
    controller = make_controller(profile_store=FakeProfileStore(profile=make_profile()))
    asyncio.run(controller.update({"goal": "8a", "training_experience_years": 4}))
    assert controller.session.goal == "8a"
    assert controller.session.training_experience_years == 4

    with pytest.raises(ValueError):
        asyncio.run(controller.update({"current_page": 3}))
    with pytest.raises(ValueError):
        asyncio.run(controller.update({"training_experience_years": -1}))


# ------------------------------ submit ---------------------------------------

def test_submit_without_email_fails_before_contacting_service():
    service = FakeSubmissionService()
    controller = make_controller(profile_store=FakeProfileStore(), service=service, session=ready_session())

    result = asyncio.run(controller.submit())

    assert not result
    assert isinstance(result.error, MissingIdentity)
    assert controller.session.error_message == "No user email found."
    assert controller.session.is_submitting is False
    assert service.calls == []


def test_submit_success_updates_profile_flags_then_dismisses():
    store = FakeProfileStore(profile=make_profile(goal="7b"))
    flags = FakeFlagStore(needs=True, show=True)
    seen_at_dismiss = {}

    def on_dismiss():
        seen_at_dismiss["goal"] = store.current_profile.goal
        seen_at_dismiss["needs"] = flags.needs
        seen_at_dismiss["show"] = flags.show

    service = FakeSubmissionService(result=True)
    controller = make_controller(
        profile_store=store,
        service=service,
        flags=flags,
        session=ready_session(goal="8a"),
        on_dismiss=on_dismiss,
    )

    result = asyncio.run(controller.submit())

    assert result
    assert service.calls[0]["goal"] == "8a"
    assert service.calls[0]["email"] == "alex@example.com"
    assert store.current_profile.goal == "8a"
    assert seen_at_dismiss == {"goal": "8a", "needs": False, "show": False}
    assert controller.dismissed is True
    assert controller.session.is_submitting is False


def test_submit_success_deletes_stored_session(session_store):
    store = FakeProfileStore(profile=make_profile())
    controller = make_controller(profile_store=store, session=ready_session(),
                                 session_store=session_store)
    asyncio.run(controller.advance())
    assert "alex@example.com" not in session_store.sessions  # last page, nothing moved

    asyncio.run(controller.update({"goal": "8b"}))
    assert "alex@example.com" in session_store.sessions
    asyncio.run(controller.submit())
    assert "alex@example.com" not in session_store.sessions


def test_submit_failure_keeps_session_for_retry():
    store = FakeProfileStore(profile=make_profile(goal="7b"))
    flags = FakeFlagStore(needs=True, show=True)
    service = FakeSubmissionService(result=False)
    session = ready_session(goal="8a", additional_notes="pls")
    controller = make_controller(profile_store=store, service=service, flags=flags, session=session)

    result = asyncio.run(controller.submit())

    assert not result
    assert isinstance(result.error, SubmissionFailed)
    assert controller.session.error_message == "Failed to save questionnaire. Please try again."
    assert controller.session.is_submitting is False
    assert controller.session.goal == "8a"
    assert controller.session.additional_notes == "pls"
    assert store.current_profile.goal == "7b"
    assert flags.needs is True
    assert controller.dismissed is False

    service.result = True
    retry = asyncio.run(controller.submit())
    assert retry
    assert controller.session.error_message is None
    assert service.calls[0] == service.calls[1]


def test_second_submit_while_in_flight_is_rejected():
    store = FakeProfileStore(profile=make_profile())
    service = FakeSubmissionService()
    controller = make_controller(profile_store=store, service=service, session=ready_session())

    async def scenario():
        service.gate = asyncio.Event()
        first = asyncio.create_task(controller.submit())
        await asyncio.sleep(0)
        assert controller.session.is_submitting is True
        assert controller.submit_enabled is False
        second = await controller.submit()
        service.gate.set()
        return await first, second

    first, second = asyncio.run(scenario())
    assert first
    assert not second
    assert isinstance(second.error, SubmissionInProgress)
    assert len(service.calls) == 1


def test_submission_finishing_after_dismiss_still_updates_profile():
    store = FakeProfileStore(profile=make_profile(goal="7b"))
    flags = FakeFlagStore()
    service = FakeSubmissionService()
    dismiss_calls = []
    controller = make_controller(profile_store=store, service=service, flags=flags,
                                 session=ready_session(goal="8a"),
                                 on_dismiss=lambda: dismiss_calls.append(True))

    async def scenario():
        service.gate = asyncio.Event()
        pending = asyncio.create_task(controller.submit())
        await asyncio.sleep(0)
        await controller.dismiss()
        service.gate.set()
        return await pending

    result = asyncio.run(scenario())
    assert result
    assert store.current_profile.goal == "8a"
    assert flags.needs is False
    assert dismiss_calls == [True]


def test_submission_exception_clears_submitting_flag():
    class ExplodingService:
        async def submit(self, answers):
            raise RuntimeError("connection reset")

    controller = make_controller(profile_store=FakeProfileStore(profile=make_profile()),
                                 service=ExplodingService(), session=ready_session())
    with pytest.raises(RuntimeError):
        asyncio.run(controller.submit())
    assert controller.session.is_submitting is False


# ------------------------------ deferral -------------------------------------

def test_complete_later_hides_prompt_but_keeps_questionnaire_needed():
    flags = FakeFlagStore(needs=True, show=True)
    dismissed = []
    controller = make_controller(profile_store=FakeProfileStore(profile=make_profile()),
                                 flags=flags, on_dismiss=lambda: dismissed.append(True))

    asyncio.run(controller.complete_later())

    assert flags.show is False
    assert flags.needs is True
    assert dismissed == [True]


def test_dismiss_only_signals_once():
    dismissed = []
    controller = make_controller(on_dismiss=lambda: dismissed.append(True))
    asyncio.run(controller.dismiss())
    asyncio.run(controller.dismiss())
    assert dismissed == [True]


# ------------------------------ shared stored session ------------------------

def test_failed_submit_does_not_restore_a_session_closed_elsewhere(session_store):
    service = FakeSubmissionService(result=False)
    submitter = make_controller(profile_store=FakeProfileStore(profile=make_profile()),
                                service=service, session=ready_session(),
                                session_store=session_store)
    closer = make_controller(profile_store=FakeProfileStore(profile=make_profile()),
                             session_store=session_store)

    async def scenario():
        service.gate = asyncio.Event()
        pending = asyncio.create_task(submitter.submit())
        await asyncio.sleep(0)
        assert "alex@example.com" in session_store.sessions
        await closer.dismiss()
        service.gate.set()
        return await pending

    result = asyncio.run(scenario())
    assert isinstance(result.error, SubmissionFailed)
    assert "alex@example.com" not in session_store.sessions


def test_edits_are_refused_while_a_submit_is_in_flight(session_store):
    service = FakeSubmissionService(result=False)
    submitter = make_controller(profile_store=FakeProfileStore(profile=make_profile()),
                                service=service, session=ready_session(current_page=3),
                                session_store=session_store)

    async def scenario():
        service.gate = asyncio.Event()
        pending = asyncio.create_task(submitter.submit())
        await asyncio.sleep(0)

        editor = make_controller(profile_store=FakeProfileStore(profile=make_profile()),
                                 session=await session_store.load("alex@example.com"),
                                 session_store=session_store)
        with pytest.raises(SubmissionInProgress):
            await editor.update({"goal": "8a"})
        with pytest.raises(SubmissionInProgress):
            await editor.advance()
        with pytest.raises(SubmissionInProgress):
            await editor.retreat()
        with pytest.raises(SubmissionInProgress):
            await submitter.update({"goal": "8a"})

        service.gate.set()
        return await pending

    asyncio.run(scenario())
    stored = asyncio.run(session_store.load("alex@example.com"))
    assert stored.goal == "7c"
    assert stored.current_page == 3
    assert stored.is_submitting is False
    assert stored.error_message == "Failed to save questionnaire. Please try again."


def test_cancelled_submit_unlocks_the_stored_session(session_store):
    service = FakeSubmissionService()
    controller = make_controller(profile_store=FakeProfileStore(profile=make_profile()),
                                 service=service, session=ready_session(),
                                 session_store=session_store)

    async def scenario():
        service.gate = asyncio.Event()
        pending = asyncio.create_task(controller.submit())
        await asyncio.sleep(0)
        assert (await session_store.load("alex@example.com")).is_submitting is True
        pending.cancel()
        with pytest.raises(asyncio.CancelledError):
            await pending

    asyncio.run(scenario())
    assert controller.session.is_submitting is False
    assert asyncio.run(session_store.load("alex@example.com")).is_submitting is False
    assert asyncio.run(controller.update({"goal": "8a"})).goal == "8a"
