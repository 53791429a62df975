"""Assistant engine — one student question in, one stored answer out.

Orchestrates a submission through the state machine

    IDLE → AWAITING_RESPONSE → RESPONDED | FAILED → (append, save) → IDLE

1. The trimmed question is appended to the conversation as the user turn
   before anything else happens.
2. Candidate knowledge is selected in CONTEXTUAL mode (project items plus
   class-wide items) and composed into the assistant prompt.
3. The provider is called exactly once. Text back means RESPONDED.
   An exception, a timeout, an empty answer or no configured provider
   means FAILED, and the fallback matcher answers from the same
   candidates. The student never sees the error.
4. The assistant turn is appended and the store saved. A cancelled call
   still stores the fallback answer and saves before the cancellation
   propagates, so no conversation ends on an unanswered question.

A per-conversation SendGuard rejects a second submission while the first
one is still awaiting its answer.

Consumed by:
- Student endpoint — POST /student/messages

Service module: imports from ai/context, ai/fallback, ai/providers/base,
ai/usage, classroom/*, knowledge/filter, models, schemas.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum

from eduai.ai import fallback
from eduai.ai.context import AssembledContext, assemble_assistant_call
from eduai.ai.providers.base import AIProvider
from eduai.ai.usage import log_ai_call
from eduai.classroom.errors import SendInProgress, ValidationFailed
from eduai.classroom.ledger import append_turn, conversation_key
from eduai.classroom.service import ClassroomService
from eduai.hooks.interfaces import Clock
from eduai.knowledge.filter import FilterMode, filter_knowledge
from eduai.models import ModelConfig
from eduai.schemas import ConversationTurn, TurnRole

logger = logging.getLogger("eduai.ai.assistant")


class ExchangeState(str, Enum):
    """States of one submission."""

    IDLE = "idle"
    AWAITING_RESPONSE = "awaiting_response"
    RESPONDED = "responded"
    FAILED = "failed"


@dataclass(frozen=True)
class AssistantReply:
    """Outcome of one submission.

    Attributes:
        conversation_key: Where both turns were stored.
        user_turn: The student's turn, appended first.
        assistant_turn: The answer that was stored.
        state: RESPONDED if the remote model answered, FAILED if the
            fallback matcher did.
        history_length: Number of turns in the conversation afterwards.
    """

    conversation_key: str
    user_turn: ConversationTurn
    assistant_turn: ConversationTurn
    state: ExchangeState
    history_length: int

    @property
    def source(self) -> str:
        """Returns "ai" for remote answers, "fallback" for local ones."""
        return "ai" if self.state is ExchangeState.RESPONDED else "fallback"


class SendGuard:
    """Allows one outstanding submission per conversation key."""

    def __init__(self) -> None:
        self._in_flight: set[str] = set()

    def is_busy(self, key: str) -> bool:
        return key in self._in_flight

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        """Marks ``key`` busy for the duration of the block.

        Raises:
            SendInProgress: If the key is already held.
        """
        if key in self._in_flight:
            raise SendInProgress(key)
        self._in_flight.add(key)
        try:
            yield
        finally:
            self._in_flight.discard(key)


class AssistantEngine:
    """Answers student questions with the remote model or the fallback matcher.

    Args:
        provider: AI provider, or None when no provider is configured
            (every answer then comes from the fallback matcher).
        model_config: Model ID and output cap for the provider.
        classroom: Owner of the Data Store and its persistence.
        clock: Source of turn timestamps.
        timeout_seconds: Upper bound on the remote call. 0 disables it.
        send_guard: Shared guard; a fresh one is created when omitted.
    """

    def __init__(
        self,
        provider: AIProvider | None,
        model_config: ModelConfig,
        classroom: ClassroomService,
        clock: Clock,
        timeout_seconds: float = 0.0,
        send_guard: SendGuard | None = None,
    ) -> None:
        self._provider = provider
        self._model_config = model_config
        self._classroom = classroom
        self._clock = clock
        self._timeout_seconds = timeout_seconds
        self.send_guard = send_guard or SendGuard()

    @property
    def has_provider(self) -> bool:
        return self._provider is not None

    async def ask(
        self,
        *,
        class_id: str,
        class_name: str,
        student_id: str,
        project_id: str | None,
        question: str,
    ) -> AssistantReply:
        """Runs one submission and stores both turns.

        Args:
            class_id: The student's class.
            class_name: Display name used in the prompt preamble.
            student_id: The asking student.
            project_id: Selected project, or None for general questions.
            question: Raw question text; surrounding whitespace is dropped.

        Returns:
            The stored turns and how the answer was produced.

        Raises:
            ValidationFailed: If the question is blank (nothing stored).
            SendInProgress: If this conversation already awaits an answer
                (nothing stored).
        """
        text = (question or "").strip()
        if not text:
            raise ValidationFailed("Question must not be empty.")

        store = self._classroom.store
        key = conversation_key(class_id, student_id, project_id)

        with self.send_guard.hold(key):
            user_turn = append_turn(store, key, TurnRole.USER, text, self._clock)

            candidates = filter_knowledge(
                store.knowledge,
                class_id,
                project_id=project_id,
                mode=FilterMode.CONTEXTUAL,
            )
            context = assemble_assistant_call(
                class_name, store.rules, class_id, project_id, candidates, text,
            )

            try:
                answer = await self._call_remote(context, key)
            except asyncio.CancelledError:
                logger.warning(
                    "Assistant call for %s was cancelled; storing fallback answer", key
                )
                append_turn(
                    store, key, TurnRole.ASSISTANT,
                    fallback.match(text, candidates), self._clock,
                )
                self._classroom.save()
                raise

            if answer is None:
                state = ExchangeState.FAILED
                answer = fallback.match(text, candidates)
            else:
                state = ExchangeState.RESPONDED

            assistant_turn = append_turn(
                store, key, TurnRole.ASSISTANT, answer, self._clock
            )
            self._classroom.save()

        return AssistantReply(
            conversation_key=key,
            user_turn=user_turn,
            assistant_turn=assistant_turn,
            state=state,
            history_length=len(store.conversations[key]),
        )

    async def _call_remote(self, context: AssembledContext, key: str) -> str | None:
        """Makes the single remote attempt.

        Returns:
            The answer text, or None for any kind of failure.
        """
        if self._provider is None:
            logger.debug("No AI provider configured; answering %s locally", key)
            return None

        start = time.monotonic()
        try:
            call = self._provider.complete(
                messages=context.messages,
                model_config=self._model_config,
            )
            if self._timeout_seconds > 0:
                text, usage = await asyncio.wait_for(call, self._timeout_seconds)
            else:
                text, usage = await call
        except Exception:
            logger.warning(
                "Assistant call failed for %s; using fallback answer",
                key,
                exc_info=True,
            )
            self._log_usage(key, start, "failed")
            return None

        if not text or not text.strip():
            logger.warning("Assistant response for %s had no text; using fallback answer", key)
            self._log_usage(key, start, "failed")
            return None

        self._log_usage(
            key, start, "responded",
            prompt_tokens=usage.prompt_tokens,
            completion_tokens=usage.completion_tokens,
        )
        return text

    def _log_usage(
        self,
        key: str,
        start: float,
        outcome: str,
        prompt_tokens: int = 0,
        completion_tokens: int = 0,
    ) -> None:
        log_ai_call(
            model_id=self._model_config.model_id,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            latency_ms=(time.monotonic() - start) * 1000,
            conversation_key=key,
            outcome=outcome,
        )
