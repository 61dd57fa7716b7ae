# src/tools/chat_controller.py
"""
Presentation state for the tutor chat, independent of Streamlit.

The Streamlit page keeps one TutorChatController per browser session in
st.session_state and calls its handlers from widget callbacks. Messages are
plain dicts:

    {"sender": "user" | "ai", "text": str, "image": Optional[str], "ts": str}

where "image" is a data URI suitable for st.image / <img src=...>.
"""

from datetime import datetime
from typing import Callable, Dict, List, Optional

from src.agents.tutor_agent.agent import TutorSession
from src.agents.tutor_agent.errors import (
    InvalidInputError,
    SessionBusyError,
    SessionNotStartedError,
    UpstreamError,
)
from src.tools.image_input import load_image_upload
from src.tools.logging_helper import get_file_logger

logger = get_file_logger("chat_controller", "chat_controller.log")

# user-facing texts
PROBLEM_MESSAGE = "Here is my math problem:"
WHY_MESSAGE = "Why did we do that?"
NEXT_STEP_MESSAGE = "What's the next step?"

INVALID_FILE_ERROR = "Please select a valid image file."
ANALYZE_ERROR = "An error occurred while analyzing the image. Please try again."
EXPLANATION_ERROR = "An error occurred while getting an explanation. Please try again."
NEXT_STEP_ERROR = "An error occurred while getting the next step. Please try again."
NO_SESSION_ERROR = "Upload a math problem to start a session."
BUSY_ERROR = "Please wait for the tutor to finish replying."


def now_ts() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


class TutorChatController:
    """Owns the displayed messages and the loading / error / session flags."""

    def __init__(self, session: TutorSession):
        self.session = session
        self.messages: List[Dict] = []
        self.uploaded_image: Optional[str] = None
        self.is_loading = False
        self.error: Optional[str] = None
        self.session_started = False

    # -------------------------
    # Handlers
    # -------------------------
    def on_file_selected(self, raw: bytes, mime_type: Optional[str]) -> bool:
        """
        Start a new tutoring session from an uploaded image.

        Returns True when the tutor answered with a first step. A rejected file
        only sets the error text; the conversation is left untouched.
        """
        if self.is_loading or self.session.is_busy:
            logger.warning("upload ignored: a reply is still pending")
            return False

        try:
            upload = load_image_upload(raw, mime_type)
        except InvalidInputError as e:
            logger.info("upload rejected: %s", e)
            self.error = INVALID_FILE_ERROR
            return False

        # restored if the session turns the upload away without touching its history
        previous = (self.messages, self.uploaded_image, self.session_started)

        self.uploaded_image = upload.data_uri
        self.session_started = True
        self.is_loading = True
        self.error = None
        self.messages = [self._message("user", PROBLEM_MESSAGE, image=upload.data_uri)]

        try:
            first_step = self.session.start_session(upload.payload_b64, upload.mime_type)
        except SessionBusyError:
            logger.warning("upload rejected by session: busy")
            self.messages, self.uploaded_image, self.session_started = previous
            self.error = BUSY_ERROR
            return False
        except InvalidInputError as e:
            logger.info("upload payload rejected by session: %s", e)
            self.messages, self.uploaded_image, self.session_started = previous
            self.error = INVALID_FILE_ERROR
            return False
        except UpstreamError:
            logger.exception("start_session failed (mime=%s, size=%d)", upload.mime_type, upload.size_bytes)
            self.reset_session()
            self.error = ANALYZE_ERROR
            return False
        finally:
            self.is_loading = False

        if not self.session_started:
            return False
        self.messages.append(self._message("ai", first_step))
        return True

    def handle_why(self) -> bool:
        return self._follow_up(WHY_MESSAGE, self.session.ask_for_explanation, EXPLANATION_ERROR)

    def handle_next_step(self) -> bool:
        return self._follow_up(NEXT_STEP_MESSAGE, self.session.ask_for_next_step, NEXT_STEP_ERROR)

    def reset_session(self) -> None:
        self.messages = []
        self.uploaded_image = None
        self.is_loading = False
        self.error = None
        self.session_started = False
        self.session.reset()

    # -------------------------
    # Internals
    # -------------------------
    def _follow_up(self, user_text: str, ask: Callable[[], str], failure_text: str) -> bool:
        if self.is_loading:
            logger.warning("%r ignored: a reply is still pending", user_text)
            return False
        if not self.session_started:
            self.error = NO_SESSION_ERROR
            return False

        self.is_loading = True
        self.error = None
        self.messages.append(self._message("user", user_text))

        try:
            reply = ask()
        except SessionBusyError:
            logger.warning("%r rejected by session: busy", user_text)
            self.error = BUSY_ERROR
            return False
        except (UpstreamError, SessionNotStartedError):
            logger.exception("follow-up %r failed", user_text)
            self.error = failure_text
            return False
        finally:
            self.is_loading = False

        if not self.session_started:
            # reset while the reply was in flight
            return False
        self.messages.append(self._message("ai", reply))
        return True

    @staticmethod
    def _message(sender: str, text: str, image: Optional[str] = None) -> Dict:
        return {"sender": sender, "text": text, "image": image, "ts": now_ts()}
