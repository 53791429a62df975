"""Local answer matcher used when the remote assistant call fails.

Scores each candidate by how many of its question's words occur in the
student's question. The first candidate with at least two overlapping words,
or whose whole question occurs in the student's question, wins; candidates
are not ranked against each other. With no match, a few keyword heuristics
pick a polite deflection to the teacher.

Pure functions only: no I/O, no state.
"""

from collections.abc import Sequence

from eduai.schemas import KnowledgeItem

# Minimum number of candidate-question words found in the student question.
MIN_KEYWORD_OVERLAP = 2

DUE_DATE_DEFLECTION = (
    "I don't have specific information about due dates for this. Please check "
    "with your teacher or look for announcements in class materials."
)
SUBMISSION_DEFLECTION = (
    "I don't have submission instructions in my knowledge base. Please ask "
    "your teacher for the specific submission process."
)
GENERIC_DEFLECTION = (
    "I don't have information about that in my knowledge base. Please ask "
    "your teacher for help with this question!"
)


def keyword_overlap(question_lower: str, candidate_question: str) -> int:
    """Counts candidate words that are substrings of the student question.

    Args:
        question_lower: The student's question, already lower-cased.
        candidate_question: A stored knowledge question (any case).

    Returns:
        Number of whitespace-separated words of the candidate question that
        occur anywhere in ``question_lower``. Repeated words count each time.
    """
    keywords = candidate_question.lower().split()
    return sum(1 for keyword in keywords if keyword in question_lower)


def is_match(question_lower: str, candidate: KnowledgeItem) -> bool:
    """Whether a candidate answers the (lower-cased) student question."""
    if keyword_overlap(question_lower, candidate.question) >= MIN_KEYWORD_OVERLAP:
        return True
    return candidate.question.lower() in question_lower


def find_match(
    question: str, candidates: Sequence[KnowledgeItem]
) -> KnowledgeItem | None:
    """Returns the first accepted candidate, or None."""
    question_lower = question.lower()
    for candidate in candidates:
        if is_match(question_lower, candidate):
            return candidate
    return None


def deflection(question: str) -> str:
    """Picks the canned "ask your teacher" message for an unmatched question."""
    question_lower = question.lower()
    if "due" in question_lower or "deadline" in question_lower:
        return DUE_DATE_DEFLECTION
    if "submit" in question_lower or "turn in" in question_lower:
        return SUBMISSION_DEFLECTION
    return GENERIC_DEFLECTION


def match(question: str, candidates: Sequence[KnowledgeItem]) -> str:
    """Answers a student question from the candidate knowledge alone.

    Args:
        question: The student's question as typed.
        candidates: Knowledge items visible in the conversation's scope,
            in the order they should be tried.

    Returns:
        The answer of the first matching candidate, verbatim, or a
        deflection message when nothing matches.
    """
    candidate = find_match(question, candidates)
    if candidate is not None:
        return candidate.answer
    return deflection(question)
