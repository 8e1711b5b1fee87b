# services/page_machine.py
import logging
from typing import List

from app.models.questionnaire import SECTION_TITLES, QuestionnaireSession
from app.services.section_validation import is_section1_valid

logger = logging.getLogger(__name__)


class QuestionnairePageMachine:
    """
    Page index over the six ordered sections, stored on the session itself.

    Only leaving page 0 is gated (name + email). Submitting from the last page
    is the controller's job and does not move the page.
    """

    def __init__(self, session: QuestionnaireSession):
        self.session = session

    @property
    def page_count(self) -> int:
        return len(SECTION_TITLES)

    @property
    def current_page(self) -> int:
        return self.session.current_page

    @property
    def current_title(self) -> str:
        return SECTION_TITLES[self.session.current_page]

    @property
    def progress_label(self) -> str:
        return f"{self.session.current_page + 1}/{self.page_count}"

    @property
    def progress(self) -> List[bool]:
        """One flag per section: filled for every page reached so far."""
        return [self.session.current_page >= index for index in range(self.page_count)]

    @property
    def is_first_page(self) -> bool:
        return self.session.current_page == 0

    @property
    def is_last_page(self) -> bool:
        return self.session.current_page == self.page_count - 1

    @property
    def can_advance(self) -> bool:
        if self.is_last_page:
            return False
        if self.is_first_page:
            return is_section1_valid(self.session)
        return True

    @property
    def can_retreat(self) -> bool:
        return not self.is_first_page

    def advance(self) -> bool:
        """Next page if allowed; returns whether the page changed."""
        if not self.can_advance:
            logger.debug(f"advance ignored on page {self.session.current_page}")
            return False
        self.session.current_page += 1
        return True

    def retreat(self) -> bool:
        """Previous page unless already on the first; returns whether the page changed."""
        if not self.can_retreat:
            return False
        self.session.current_page -= 1
        return True
