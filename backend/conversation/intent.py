"""
Intent classification for a user utterance.

A fixed, ordered cascade of (predicate, intent) rules; the first predicate
that holds decides. Predicates are plain functions so each can be tested on
its own.
"""
import re
from enum import Enum
from typing import Callable, List, Sequence, Tuple

from conversation.models import PendingSuggestion, Turn


class Intent(str, Enum):
    REJECTION = "rejection"
    CONFIRMATION = "confirmation"
    METADATA = "metadata"
    CONVERSATIONAL = "conversational"
    FOLLOW_UP = "follow_up"
    DATA_QUERY = "data_query"


# Acknowledgements longer than this are treated as new questions
ACK_MAX_LENGTH = 60
SHORT_MESSAGE_LENGTH = 15

_AFFIRMATIVE = (
    r"yes|yeah|yep|yup|sure|ok|okay|alright|correct|right|that's right|exactly"
    r"|i want that|i mean that|yes i want|yes i mean"
)
CONFIRMATION_PATTERNS = [
    re.compile(rf"^({_AFFIRMATIVE})(\s|$|\.|!|,)", re.IGNORECASE),
    re.compile(rf"^({_AFFIRMATIVE})\s+(i|to|want|mean)", re.IGNORECASE),
]

REJECTION_PATTERNS = [
    re.compile(r"^(no|nope|nah|not really|not exactly|that's not|incorrect|wrong)(\s|$|\.|!|,)", re.IGNORECASE),
]

METADATA_PATTERNS = [
    re.compile(r"\b(is|was|were|does|did) (this|that|it|these|those) (from|using|come from|based on)\b", re.IGNORECASE),
    re.compile(r"\b(where|what) (is|was|were|does|did) (this|that|it|these|those) (from|come from)\b", re.IGNORECASE),
    re.compile(r"\b(is|was|were) (this|that|it) (primary|secondary)\b", re.IGNORECASE),
    re.compile(r"\b(which|what) (table|data|source|database|dataset) (is|was|were|does|did)\b", re.IGNORECASE),
    re.compile(r"\bwhich (table|source)\b", re.IGNORECASE),
    re.compile(r"\b(does|did) (this|that|it) (use|come from|include)\b", re.IGNORECASE),
    re.compile(r"^(this|that|it) (is|was|were|comes|come) from\b", re.IGNORECASE),
]

CONVERSATIONAL_PATTERNS = [
    re.compile(r"^who are you", re.IGNORECASE),
    re.compile(r"^what are you", re.IGNORECASE),
    re.compile(r"^tell me about yourself", re.IGNORECASE),
    re.compile(r"^what can you do", re.IGNORECASE),
    re.compile(r"^help\b", re.IGNORECASE),
    re.compile(r"^(hi|hello|hey|greetings?|good\s(morning|afternoon|evening))\b", re.IGNORECASE),
    re.compile(r"^(wow|cool|nice|great|awesome|amazing|interesting|thanks|thank you)\b", re.IGNORECASE),
    re.compile(r"^(that's|that is|this is|it's|it is) (crazy|cool|nice|great|awesome|amazing|interesting)", re.IGNORECASE),
    re.compile(r"^(ok|okay|alright|sure|yeah|yes|no|nope)(\s|$|\.|!)", re.IGNORECASE),
    re.compile(r"^(i (think|believe|guess)|sounds good|makes sense)", re.IGNORECASE),
]

# Request words: on their own they are too vague to query ("top stuff", "show me")
ANALYTIC_VERBS = re.compile(
    r"\b(show|list|what|which|how|when|where|who|tell|find|get|give|provide|calculate|analyze"
    r"|top|best|worst)\b",
    re.IGNORECASE,
)
# Measures and entities: any one of these makes a short message a data request
ANALYTIC_SUBJECTS = re.compile(
    r"\b(total|sum|average|count|sales|sellers?|selling|distributors?|products?|orders?|revenue|amount|growth"
    r"|compare|comparison|years?|months?|data)\b",
    re.IGNORECASE,
)

# "top 10", "2024"
ANY_NUMBER = re.compile(r"\d")

FOLLOW_UP_PATTERNS = [
    re.compile(r"\b(these|those|them|their|each of)\b", re.IGNORECASE),
    re.compile(r"^(and|also|now|then|what about|how about)\b", re.IGNORECASE),
    re.compile(r"\b(same|previous|above)\b", re.IGNORECASE),
]


def _normalize(utterance: str) -> str:
    return (utterance or "").strip().lower()


def has_pending_suggestion(history: Sequence[Turn]) -> bool:
    return PendingSuggestion.from_history(history) is not None


def is_rejection(utterance: str, history: Sequence[Turn]) -> bool:
    text = _normalize(utterance)
    if len(text) > ACK_MAX_LENGTH or not has_pending_suggestion(history):
        return False
    return any(p.search(text) for p in REJECTION_PATTERNS)


def is_confirmation(utterance: str, history: Sequence[Turn]) -> bool:
    text = _normalize(utterance)
    if len(text) > ACK_MAX_LENGTH or not has_pending_suggestion(history):
        return False
    return any(p.search(text) for p in CONFIRMATION_PATTERNS)


def is_metadata_question(utterance: str, history: Sequence[Turn]) -> bool:
    if not history:
        return False
    text = _normalize(utterance)
    return any(p.search(text) for p in METADATA_PATTERNS)


def is_analytic(text: str) -> bool:
    if ANALYTIC_SUBJECTS.search(text) or ANY_NUMBER.search(text):
        return True
    return len(ANALYTIC_VERBS.findall(text)) >= 2


def is_conversational(utterance: str, history: Sequence[Turn] = ()) -> bool:
    text = _normalize(utterance)
    if any(p.search(text) for p in CONVERSATIONAL_PATTERNS):
        return True
    return len(text) < SHORT_MESSAGE_LENGTH and "?" not in text and not is_analytic(text)


def is_follow_up(utterance: str, history: Sequence[Turn]) -> bool:
    if not history:
        return False
    text = _normalize(utterance)
    return any(p.search(text) for p in FOLLOW_UP_PATTERNS)


IntentRule = Tuple[Callable[[str, Sequence[Turn]], bool], Intent]

INTENT_RULES: List[IntentRule] = [
    (is_rejection, Intent.REJECTION),
    (is_confirmation, Intent.CONFIRMATION),
    (is_metadata_question, Intent.METADATA),
    (is_conversational, Intent.CONVERSATIONAL),
    (is_follow_up, Intent.FOLLOW_UP),
]


def classify_intent(utterance: str, history: Sequence[Turn] = ()) -> Intent:
    for predicate, intent in INTENT_RULES:
        if predicate(utterance, history):
            return intent
    return Intent.DATA_QUERY
