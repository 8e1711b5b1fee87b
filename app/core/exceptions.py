# app/core/exceptions.py
"""
Error kinds for the questionnaire flow.

None of these is fatal: every failure leaves the in-progress session intact
so the user can retry.
"""


class QuestionnaireError(Exception):
    """Base class. `user_message` is what the questionnaire shows on screen."""

    user_message = "Something went wrong."

    def __init__(self, message=None):
        self.message = message or self.user_message
        super().__init__(self.message)


class MissingIdentity(QuestionnaireError):
    """No email is known at submit time; the store is never contacted."""

    user_message = "No user email found."


class SubmissionFailed(QuestionnaireError):
    """The answer submission service reported failure. Retryable."""

    user_message = "Failed to save questionnaire. Please try again."


class SubmissionInProgress(QuestionnaireError):
    """A second submit arrived while the first is still in flight."""

    user_message = "Your questionnaire is already being saved."


class MalformedLegacyData(QuestionnaireError):
    """An unparseable attribute-rating or list entry. Always recovered."""

    user_message = "Some saved answers could not be read."
