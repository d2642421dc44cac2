"""
Entity extraction from previous answers.

Answers list named amounts ("1. ACME CORP: PKR 1,000", "| BETA LTD | PKR 900 |").
The most recent assistant turn containing such a list provides the names that
"these"/"those"/"each" refer to in a follow-up question.
"""
import re
from typing import List, Optional, Sequence

from conversation.models import EntitySet, Turn

ENTITY_SCAN_TURNS = 6
MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 60

CURRENCY = r"(?:PKR|Rs\.?|USD|\$|€|£)"
_SEP = r"\s*[:\-–—]\s*\**\s*"

LIST_PATTERNS = [
    # 1. ACME CORP: PKR 1,000
    re.compile(rf"^\s*\d+[.)]\s+\**(?P<name>[^\n|*:]+?)\**{_SEP}{CURRENCY}", re.MULTILINE),
    # **ACME CORP**: PKR 1,000
    re.compile(rf"\*\*(?P<name>[^\n|*:]+?)\*\*{_SEP}{CURRENCY}"),
    # - ACME CORP: PKR 1,000
    re.compile(rf"^\s*[•\-*]\s+\**(?P<name>[^\n|*:]+?)\**{_SEP}{CURRENCY}", re.MULTILINE),
    # | 1 | ACME CORP | PKR 1,000 |
    re.compile(rf"^\|\s*(?:\d+\s*\|\s*)?(?P<name>[^\n|]+?)\s*\|\s*\**\s*{CURRENCY}", re.MULTILINE),
]

_PERIOD_NAME = re.compile(
    r"^(january|february|march|april|may|june|july|august|september|october|november|december"
    r"|jan|feb|mar|apr|jun|jul|aug|sep|sept|oct|nov|dec)(\s+(19|20)\d{2})?$"
    r"|^q[1-4]\b|^(19|20)\d{2}\b|^(total|grand total)$",
    re.IGNORECASE,
)

PERIOD_PATTERNS = [
    re.compile(r"\b(?:last|past|previous)\s+(?:\d+\s+)?(?:months?|years?|weeks?|quarters?)\b", re.IGNORECASE),
    re.compile(r"\b(?:this|current)\s+(?:month|year|quarter)\b", re.IGNORECASE),
    re.compile(r"\b(?:19|20)\d{2}\b"),
]


def _clean_name(raw: str) -> str:
    return raw.strip().strip("*").strip(" .,-").strip()


def _is_plausible(name: str) -> bool:
    if not MIN_NAME_LENGTH <= len(name) <= MAX_NAME_LENGTH:
        return False
    return not _PERIOD_NAME.search(name)


def extract_names(text: str) -> List[str]:
    """Names from every list-of-amounts pattern, in order of first appearance."""
    found = []
    for pattern in LIST_PATTERNS:
        for m in pattern.finditer(text or ""):
            found.append((m.start("name"), _clean_name(m.group("name"))))

    names: List[str] = []
    seen = set()
    for _, name in sorted(found, key=lambda item: item[0]):
        key = name.lower()
        if _is_plausible(name) and key not in seen:
            seen.add(key)
            names.append(name)
    return names


def detect_entity_type(text: str) -> Optional[str]:
    lower = (text or "").lower()
    dist = lower.find("distributor")
    prod = lower.find("product")
    if dist < 0 and prod < 0:
        return None
    if prod < 0 or (0 <= dist < prod):
        return "distributors"
    return "products"


def detect_period(*texts: str) -> Optional[str]:
    for text in texts:
        for pattern in PERIOD_PATTERNS:
            m = pattern.search(text or "")
            if m:
                return m.group(0)
    return None


def extract_entities(history: Sequence[Turn]) -> EntitySet:
    """
    Names listed in the most recent assistant answer that has any.
    Older turns are never merged in; history is not modified.
    """
    window = list(history[-ENTITY_SCAN_TURNS:])
    for idx in range(len(window) - 1, -1, -1):
        turn = window[idx]
        if turn.role != "assistant":
            continue
        names = extract_names(turn.content)
        if not names:
            continue
        question = next((t.content for t in reversed(window[:idx]) if t.role == "user"), "")
        return EntitySet(
            entities=names,
            entity_type=detect_entity_type(question + "\n" + turn.content),
            period=detect_period(question, turn.content),
        )
    return EntitySet()
