# services/questionnaire_controller.py
"""
Drives one questionnaire from presentation to submit or dismissal.

Flow:
  activate()  -> refresh profile (if an email is known) -> hydrate session
  advance() / retreat() / update() while the user fills in the pages
  submit()    -> serialize -> submit -> apply to held profile -> clear flags
                 -> dismiss   (or keep the session and report the error)
"""
import logging
from typing import Any, Callable, Dict, Optional

from app.core.exceptions import (
    MissingIdentity,
    QuestionnaireError,
    SubmissionFailed,
    SubmissionInProgress,
)
from app.models.questionnaire import QuestionnaireSession
from app.services.collaborators import (
    AnswerSubmissionService,
    FlagStore,
    ProfileStore,
    SessionStore,
)
from app.services.page_machine import QuestionnairePageMachine
from app.services.profile_mapper import apply_answers, hydrate, serialize
from app.services.section_validation import is_submit_enabled

logger = logging.getLogger(__name__)

# Flow state is owned by the controller, never by user input
READ_ONLY_FIELDS = {"current_page", "is_submitting", "error_message"}


class QuestionnaireResult:
    """Outcome of a controller operation."""

    def __init__(
        self,
        success: bool,
        message: str,
        data: Optional[Any] = None,
        error: Optional[QuestionnaireError] = None,
    ):
        self.success = success
        self.message = message
        self.data = data
        self.error = error

    def __bool__(self) -> bool:
        return self.success

    def __repr__(self) -> str:
        return f"QuestionnaireResult(success={self.success}, message={self.message!r})"


class QuestionnaireController:

    def __init__(
        self,
        profile_store: ProfileStore,
        submission_service: AnswerSubmissionService,
        flag_store: FlagStore,
        session: Optional[QuestionnaireSession] = None,
        session_store: Optional[SessionStore] = None,
        on_dismiss: Optional[Callable[[], None]] = None,
    ):
        self.profile_store = profile_store
        self.submission_service = submission_service
        self.flag_store = flag_store
        self.session_store = session_store
        self.on_dismiss = on_dismiss
        self.dismissed = False
        self._set_session(session or QuestionnaireSession())

    def _set_session(self, session: QuestionnaireSession) -> None:
        self.session = session
        self.pages = QuestionnairePageMachine(session)

    # ------------------------------ state ------------------------------

    @property
    def user_email(self) -> Optional[str]:
        profile = self.profile_store.current_profile
        if profile is not None and profile.email:
            return profile.email
        return None

    @property
    def submit_enabled(self) -> bool:
        return is_submit_enabled(self.session)

    @property
    def can_advance(self) -> bool:
        return self.pages.can_advance

    async def _persist(self, only_if_exists: bool = False) -> None:
        email = self.user_email
        if self.session_store is None or self.dismissed or not email:
            return
        await self.session_store.save(email, self.session, only_if_exists=only_if_exists)

    def _ensure_editable(self) -> None:
        # a submit owns the session until it settles
        if self.session.is_submitting:
            raise SubmissionInProgress()

    # ------------------------------ lifecycle --------------------------

    async def activate(self) -> QuestionnaireSession:
        """Load existing answers into the session, refreshing the profile first when possible."""
        email = self.user_email
        if email:
            refreshed = await self.profile_store.fetch_profile(email)
            if refreshed is None:
                logger.warning(f"Profile refresh failed for {email}, using the cached profile")
        else:
            logger.info("No user email known, loading questionnaire from the held profile")

        if self.dismissed:
            return self.session

        self._set_session(hydrate(self.session, self.profile_store.current_profile))
        await self._persist()
        return self.session

    async def dismiss(self) -> None:
        """Close the questionnaire. The session is discarded; safe to call twice."""
        if self.dismissed:
            return
        email = self.user_email
        self.dismissed = True
        if self.session_store is not None and email:
            await self.session_store.delete(email)
        if self.on_dismiss is not None:
            self.on_dismiss()

    async def complete_later(self) -> None:
        """Stop auto-presenting the questionnaire but leave it marked as needed."""
        await self.flag_store.set_show_questionnaire_prompt(False)
        await self.dismiss()

    # ------------------------------ navigation & input ------------------

    async def advance(self) -> bool:
        self._ensure_editable()
        moved = self.pages.advance()
        if moved:
            await self._persist()
        return moved

    async def retreat(self) -> bool:
        self._ensure_editable()
        moved = self.pages.retreat()
        if moved:
            await self._persist()
        return moved

    async def update(self, changes: Dict[str, Any]) -> QuestionnaireSession:
        """
        Apply user input. Values are validated on assignment (ratings clamp,
        duplicate options collapse); flow-state fields are rejected, and so is
        any edit while a submit is in flight.
        """
        self._ensure_editable()
        blocked = READ_ONLY_FIELDS.intersection(changes)
        if blocked:
            raise ValueError(f"Fields cannot be edited directly: {sorted(blocked)}")
        for field, value in changes.items():
            setattr(self.session, field, value)
        await self._persist()
        return self.session

    # ------------------------------ submit -----------------------------

    async def submit(self) -> QuestionnaireResult:
        session = self.session

        if session.is_submitting:
            error = SubmissionInProgress()
            logger.warning("Rejected submit while another one is in flight")
            return QuestionnaireResult(False, error.user_message, error=error)

        session.error_message = None

        email = self.user_email
        if not email:
            error = MissingIdentity()
            session.error_message = error.user_message
            logger.error("Questionnaire submit without a user email")
            return QuestionnaireResult(False, error.user_message, error=error)

        answers = serialize(session, email=email)
        session.is_submitting = True
        await self._persist()

        logger.info(f"Submitting questionnaire for {email}")
        saved = False
        try:
            saved = await self.submission_service.submit(answers)
        except Exception as e:
            logger.error(f"Questionnaire submission raised for {email}: {e}")
            raise
        finally:
            # also runs on cancellation, so a stored session never stays locked
            if not saved:
                session.is_submitting = False
                await self._persist(only_if_exists=True)

        if not saved:
            error = SubmissionFailed()
            session.error_message = error.user_message
            await self._persist(only_if_exists=True)
            logger.warning(f"Questionnaire submission failed for {email}")
            return QuestionnaireResult(False, error.user_message, data=answers, error=error)

        # Local profile first, then flags, then dismissal
        profile = self.profile_store.current_profile
        if profile is not None:
            self.profile_store.replace_profile(apply_answers(profile, answers))
        await self.flag_store.set_needs_questionnaire(False)
        await self.flag_store.set_show_questionnaire_prompt(False)
        session.is_submitting = False

        if self.dismissed:
            logger.info(f"Questionnaire for {email} saved after it was dismissed")
        else:
            await self.dismiss()

        return QuestionnaireResult(True, "Questionnaire saved", data=answers)
