# src/agents/tutor_agent/agent.py
# Ensure environment variables from .env are loaded BEFORE GenAI clients are created.
from dotenv import load_dotenv
import os
load_dotenv()  # loads GOOGLE_API_KEY from .env into environment variables, if present

"""
Socratic tutoring session backed by a single Gemini generate_content call.

A TutorSession owns one linear conversation history. Every request sends the
whole history plus the fixed system instruction; the user turn is appended
before the call and rolled back if the call fails, so a retry starts from the
same state.
"""

import base64
import binascii
import threading
from typing import List, Optional

from google import genai
from google.genai import types

from src.agents.tutor_agent.errors import (
    InvalidInputError,
    SessionBusyError,
    SessionNotStartedError,
    UpstreamError,
)
from src.tools.logging_helper import get_file_logger

logger = get_file_logger("tutor_agent", "tutor_agent_events.log")

# -------------------------
# Model configuration
# -------------------------
DEFAULT_MODEL = os.getenv("TUTOR_MODEL", "gemini-2.5-flash")
# complex problems get a large thinking budget
DEFAULT_THINKING_BUDGET = int(os.getenv("TUTOR_THINKING_BUDGET", "32768"))

# -------------------------
# Prompts
# -------------------------
SYSTEM_INSTRUCTION = """You are a compassionate, Socratic math tutor. Your goal is to guide students to solve problems themselves, not to give them the answer. You must be patient, encouraging, and break down complex problems into single, manageable steps. Never solve the entire problem at once. Always wait for the student to engage before providing the next step. Your tone should be that of a helpful teacher, not a robot. Never start your response with "The first step is..." or "The next step is...". Just state the action directly in a clear, instructional manner. For example, instead of "The first step is to distribute the 2", say "First, distribute the 2 to each term inside the parentheses."
"""

FIRST_STEP_PROMPT = (
    "Here is a math problem I am stuck on. Can you please guide me through it? "
    "What is the very first step I should take to begin solving it? Only give me the first step."
)

EXPLAIN_WHY_PROMPT = (
    "I'm not sure I understand the last step you gave me. Could you explain the concept "
    "behind why we did that? Please don't move on to the next step, just explain the 'why'."
)

NEXT_STEP_PROMPT = "Okay, I think I understand that now. What is the single next step I should take?"


class TutorSession:
    """
    Conversation state for one tutoring session.

    Args:
        client: a google.genai Client. When omitted one is created from the
            environment (GOOGLE_API_KEY / GEMINI_API_KEY).
        model: Gemini model identifier.
        system_instruction: persona text sent with every request.
        thinking_budget: thinking tokens allowed per request; None disables
            the thinking config entirely.
    """

    def __init__(
        self,
        client: Optional[genai.Client] = None,
        model: str = DEFAULT_MODEL,
        system_instruction: str = SYSTEM_INSTRUCTION,
        thinking_budget: Optional[int] = DEFAULT_THINKING_BUDGET,
    ):
        self._client = client if client is not None else genai.Client()
        self.model = model
        self.system_instruction = system_instruction
        self.thinking_budget = thinking_budget
        self._history: List[types.Content] = []
        # bumped by reset(); a reply that lands after a reset is not recorded
        self._generation = 0
        self._lock = threading.Lock()

    # -------------------------
    # State
    # -------------------------
    @property
    def history(self) -> List[types.Content]:
        """A copy of the conversation history (oldest first)."""
        return list(self._history)

    @property
    def is_active(self) -> bool:
        return bool(self._history)

    @property
    def is_busy(self) -> bool:
        return self._lock.locked()

    def reset(self) -> None:
        """Forget the whole conversation."""
        self._history = []
        self._generation += 1
        logger.info("session reset")

    # -------------------------
    # Intents
    # -------------------------
    def start_session(self, image_base64: str, mime_type: str) -> str:
        """
        Start over with a new problem image and return the tutor's first step.

        Only the base64 payload (no data-URI prefix) and its MIME type are expected.
        A payload that is not valid base64 raises InvalidInputError and leaves the
        current conversation untouched.
        """
        try:
            image_bytes = base64.b64decode(image_base64, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidInputError("Image payload is not valid base64.") from e
        if not image_bytes:
            raise InvalidInputError("Image payload is empty.")
        image_part = types.Part(inline_data=types.Blob(mime_type=mime_type, data=image_bytes))
        return self._generate_response([types.Part(text=FIRST_STEP_PROMPT), image_part], fresh=True)

    def ask_for_explanation(self) -> str:
        """Ask the tutor to explain the concept behind the last step."""
        self._require_active()
        return self._generate_response([types.Part(text=EXPLAIN_WHY_PROMPT)])

    def ask_for_next_step(self) -> str:
        """Ask the tutor for the single next step."""
        self._require_active()
        return self._generate_response([types.Part(text=NEXT_STEP_PROMPT)])

    # -------------------------
    # Internals
    # -------------------------
    def _require_active(self) -> None:
        if not self._history:
            raise SessionNotStartedError("Submit a problem image before asking follow-up questions.")

    def _build_config(self) -> types.GenerateContentConfig:
        if self.thinking_budget is None:
            return types.GenerateContentConfig(system_instruction=self.system_instruction)
        return types.GenerateContentConfig(
            system_instruction=self.system_instruction,
            thinking_config=types.ThinkingConfig(thinking_budget=self.thinking_budget),
        )

    def _generate_response(self, prompt_parts: List[types.Part], fresh: bool = False) -> str:
        if not self._lock.acquire(blocking=False):
            raise SessionBusyError("A tutor reply is still pending.")
        try:
            if fresh:
                self.reset()
            generation = self._generation
            self._history.append(types.Content(role="user", parts=prompt_parts))
            logger.info("generate_content: model=%s turns=%d", self.model, len(self._history))
            try:
                response = self._client.models.generate_content(
                    model=self.model,
                    contents=list(self._history),
                    config=self._build_config(),
                )
                text = response.text
                if not text:
                    raise ValueError("model returned an empty response")
            except Exception as e:
                # drop the user turn so a retry starts clean
                if generation == self._generation:
                    self._history.pop()
                logger.exception("Gemini API error; rolled back to %d turns", len(self._history))
                raise UpstreamError("Failed to get a response from the AI tutor.") from e

            if generation != self._generation:
                logger.warning("session was reset while waiting; reply discarded")
                return text

            self._history.append(types.Content(role="model", parts=[types.Part(text=text)]))
            logger.info("generate_content ok: reply_chars=%d turns=%d", len(text), len(self._history))
            return text
        finally:
            self._lock.release()
