"""Last-resort text heuristics shared by every parse strategy.

These are deliberately crude: they only guarantee that a claim always has a
subject, predicate and object.
"""

import re

UNKNOWN = "unknown"
DEFAULT_PREDICATE = "relates-to"

ACTION_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\b(announced|released|launched|developed|created|unveiled|introduced|discovered)\b", re.I),
    re.compile(r"\b(increased|decreased|improved|reduced|enhanced|optimized|upgraded|updated)\b", re.I),
    re.compile(r"\b(witnessing|experiencing|facing|seeing|observing|encountering|undergoing)\b", re.I),
    re.compile(r"\b(rising|falling|growing|declining|spreading|expanding|contracting)\b", re.I),
    re.compile(r"\b(raise|rise|increase|surge|spike|outbreak|spread|transmission)\b", re.I),
)

_COMMON_VERBS = ("witnessing", "experiencing", "announced", "released", "is", "are", "has", "have")

_STOPWORDS = frozenset({
    "a", "an", "the", "and", "or", "but", "in", "on", "at", "to", "for", "of",
    "with", "by", "again", "from", "that", "this", "these", "those", "which",
    "while", "about", "into", "than", "then", "there", "their", "they", "have",
    "has", "had", "was", "were", "will", "would", "could", "should", "been",
})

_TOKEN_RE = re.compile(r"[^\W_][\w'%-]*")


def tokens(text: str) -> list[str]:
    return _TOKEN_RE.findall(text)


def word_count(text: str) -> int:
    return len(text.split())


def first_matches(patterns: tuple[re.Pattern[str], ...], text: str) -> list[str]:
    """First match of each pattern, in pattern order, without duplicates."""
    found: list[str] = []
    seen: set[str] = set()
    for pattern in patterns:
        match = pattern.search(text)
        if match is None:
            continue
        value = match.group(1) if match.groups() else match.group(0)
        if value.lower() not in seen:
            seen.add(value.lower())
            found.append(value)
    return found


def last_resort_subject(text: str) -> str:
    """First capitalized token in the text."""
    for token in tokens(text):
        if token[0].isupper():
            return token
    return UNKNOWN


def last_resort_predicate(text: str) -> str:
    actions = first_matches(ACTION_PATTERNS, text)
    if actions:
        return actions[0]
    lowered = {token.lower() for token in tokens(text)}
    for verb in _COMMON_VERBS:
        if verb in lowered:
            return verb
    return DEFAULT_PREDICATE


def last_resort_object(text: str) -> str:
    """Longest non-stopword token; earliest wins ties."""
    candidates = [
        token for token in tokens(text)
        if len(token) > 3 and token.lower() not in _STOPWORDS
    ]
    if not candidates:
        return UNKNOWN
    return max(candidates, key=len)
