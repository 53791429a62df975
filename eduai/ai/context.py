"""Context assembly — layered rules, knowledge block, student question.

Builds the single prompt string handed to the remote assistant call, in a
fixed order:

    1. Role preamble naming the class
    2. GLOBAL RULES      (if non-empty)
    3. CLASS RULES       (if set for the class)
    4. PROJECT RULES     (if a project is selected and has rules)
    5. KNOWLEDGE BASE    (every candidate as a Q/A pair, candidate order)
    6. Instruction to prefer the knowledge base and defer to the teacher
    7. The student's question

Rules are additive: a project rule never replaces the class or global rule,
all three can appear together. The exact text is part of the contract —
golden tests pin it, and the remote model's answers depend on it.

Consumed by:
- AssistantEngine — calls assemble_assistant_call() once per submission

Service module: imports from schemas only.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from eduai.schemas import KnowledgeItem, RuleSet

KNOWLEDGE_INSTRUCTION = (
    "IMPORTANT: Base your answer primarily on the knowledge base above. "
    "If the information isn't available, politely tell the student to ask "
    "their teacher."
)

_RULE_HEADERS = (
    ("GLOBAL RULES", "global"),
    ("CLASS RULES", "class"),
    ("PROJECT RULES", "project"),
)


@dataclass(frozen=True)
class AssembledContext:
    """Provider-ready assistant call payload.

    The whole composed context travels as one user message; there is no
    separate system prompt.
    """

    prompt: str

    @property
    def messages(self) -> list[dict[str, str]]:
        """The payload in AIProvider.complete() message format."""
        return [{"role": "user", "content": self.prompt}]


def layered_rules(
    rules: RuleSet, class_id: str, project_id: str | None
) -> list[tuple[str, str]]:
    """Returns the non-empty rule blocks in specificity order.

    Args:
        rules: The store's RuleSet.
        class_id: Class whose rule applies.
        project_id: Project whose rule applies, or None for general chat.

    Returns:
        (header, text) pairs, global first, project last.
    """
    texts = {
        "global": rules.global_rules,
        "class": rules.classes.get(class_id, ""),
        "project": rules.projects.get(project_id, "") if project_id else "",
    }
    return [(header, texts[scope]) for header, scope in _RULE_HEADERS if texts[scope]]


def compose(
    class_name: str,
    rules: RuleSet,
    class_id: str,
    project_id: str | None,
    candidates: Sequence[KnowledgeItem],
    question: str,
) -> str:
    """Composes the full assistant prompt.

    Args:
        class_name: Display name of the student's class.
        rules: Global, per-class and per-project rule text.
        class_id: The student's class.
        project_id: Selected project, or None for general questions.
        candidates: Knowledge visible in this scope, in display order.
        question: The student's question, trimmed.

    Returns:
        The prompt string, byte-for-byte reproducible for the same inputs.
    """
    parts = [f'You are an AI teaching assistant for "{class_name}".\n\n']

    for header, text in layered_rules(rules, class_id, project_id):
        parts.append(f"{header}:\n{text}\n\n")

    if candidates:
        parts.append("KNOWLEDGE BASE:\n")
        for item in candidates:
            parts.append(f"Q: {item.question}\nA: {item.answer}\n\n")

    parts.append(f"{KNOWLEDGE_INSTRUCTION}\n\n")
    parts.append(
        f"Student's Question: {question}\n\nProvide a helpful, friendly response:"
    )
    return "".join(parts)


def assemble_assistant_call(
    class_name: str,
    rules: RuleSet,
    class_id: str,
    project_id: str | None,
    candidates: Sequence[KnowledgeItem],
    question: str,
) -> AssembledContext:
    """Wraps compose() in the payload type the engine hands to a provider."""
    return AssembledContext(
        prompt=compose(class_name, rules, class_id, project_id, candidates, question)
    )
