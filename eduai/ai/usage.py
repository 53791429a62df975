"""Structured usage logging for AI calls.

Emits one structured log line per remote assistant call with all fields
needed for cost analysis. Machine-parseable via the ``extra`` dict —
standard JSON log formatters (e.g., python-json-logger) pick these up
automatically.

Logger name: ``eduai.ai.usage``

Imports only stdlib.
"""

import logging

logger = logging.getLogger("eduai.ai.usage")


def log_ai_call(
    *,
    model_id: str,
    prompt_tokens: int,
    completion_tokens: int,
    latency_ms: float,
    conversation_key: str,
    outcome: str,
) -> None:
    """Emits a structured INFO log for one remote assistant call.

    Failed calls are logged too (with zero tokens) so the failure rate can
    be read from the same stream.

    Args:
        model_id: The model identifier used for this call.
        prompt_tokens: Number of input tokens consumed.
        completion_tokens: Number of output tokens generated.
        latency_ms: Wall-clock duration of the call in milliseconds.
        conversation_key: The conversation this call answered.
        outcome: "responded" or "failed".
    """
    logger.info(
        "AI call: %s %s tokens_in=%d tokens_out=%d latency=%.0fms conversation=%s",
        outcome,
        model_id,
        prompt_tokens,
        completion_tokens,
        latency_ms,
        conversation_key,
        extra={
            "model_id": model_id,
            "prompt_tokens": prompt_tokens,
            "completion_tokens": completion_tokens,
            "latency_ms": latency_ms,
            "conversation_key": conversation_key,
            "outcome": outcome,
        },
    )
