"""Lightweight text analysis used by the processing pipeline.

Everything here is regex and frequency based so a document can be analyzed
without any model or network call. The functions are synchronous and CPU
bound; the pipeline runs them in worker threads.
"""
import re
from collections import Counter
from typing import Dict, List

STOPWORDS = frozenset("""
a about above after again against all also am an and any are as at be because been before
being below between both but by can could did do does doing down during each few for from
further had has have having he her here hers herself him himself his how however i if in
into is it its itself just may me might more most must my myself no nor not now of off on
once only or other our ours ourselves out over own per same shall she should so some such
than that the their theirs them themselves then there these they this those through to too
under until up upon us very was we were what when where which while who whom why will with
within without would you your yours yourself yourselves page pages
""".split())

MONTHS = r"(?:jan|feb|mar|apr|may|jun|jul|aug|sep|sept|oct|nov|dec)[a-z]*"

ENTITY_PATTERNS = [
    ("email", re.compile(r"\b[\w.+-]+@[\w-]+(?:\.[\w-]+)+\b")),
    ("url", re.compile(r"\bhttps?://[^\s<>\"')\]]*[^\s<>\"')\].,;:!?]")),
    ("date", re.compile(
        r"\b\d{4}-\d{2}-\d{2}\b"
        r"|\b\d{1,2}[/.-]\d{1,2}[/.-]\d{2,4}\b"
        rf"|\b{MONTHS}\.? \d{{1,2}},? \d{{4}}\b"
        rf"|\b\d{{1,2}} {MONTHS}\.? \d{{4}}\b",
        re.IGNORECASE,
    )),
    ("money", re.compile(r"[$€£]\s?\d[\d,]*(?:\.\d+)?(?:\s?(?:million|billion|[mbk]))?\b", re.IGNORECASE)),
    ("percentage", re.compile(r"\b\d+(?:\.\d+)?\s?%")),
    ("phone", re.compile(r"(?:\+\d{1,3}[\s.-]?)?\(?\b\d{3}\)?[\s.-]\d{3}[\s.-]\d{4}\b")),
]

NAME_PATTERN = re.compile(r"\b[A-Z][a-z]+(?:\s+(?:of\s+|&\s+)?[A-Z][a-z]+)+\b")
WORD_PATTERN = re.compile(r"[A-Za-z][A-Za-z'-]{2,}")
SENTENCE_SPLIT = re.compile(r"[.!?]+")
PARAGRAPH_SPLIT = re.compile(r"\n\s*\n")

MAX_ENTITIES = 50


def get_text_statistics(text: str) -> Dict[str, float]:
    words = text.split()
    return {
        "word_count": len(words),
        "character_count": len(text),
        "sentence_count": len([s for s in SENTENCE_SPLIT.split(text) if s.strip()]),
        "paragraph_count": len([p for p in PARAGRAPH_SPLIT.split(text) if p.strip()]),
        "average_word_length": round(sum(len(w) for w in words) / len(words), 2) if words else 0.0,
    }


def _clean_name(match: str):
    parts = match.split()
    while parts and parts[0].lower() in STOPWORDS:
        parts = parts[1:]
    if len(parts) < 2:
        return None
    return " ".join(parts)


def extract_entities(text: str) -> List[dict]:
    """
    Find structured values and proper names in ``text``.

    Returns dicts of ``text``, ``type`` and ``count``, most frequent first;
    ties keep the order of first appearance.
    """
    counts: Counter = Counter()
    for entity_type, pattern in ENTITY_PATTERNS:
        for match in pattern.findall(text):
            counts[(match.strip(), entity_type)] += 1

    for match in NAME_PATTERN.findall(text):
        name = _clean_name(match)
        if name:
            counts[(name, "name")] += 1

    return [
        {"text": value, "type": entity_type, "count": count}
        for (value, entity_type), count in counts.most_common(MAX_ENTITIES)
    ]


def extract_keywords_from_text(text: str, limit: int = 15) -> List[str]:
    words = (w.lower().strip("'-") for w in WORD_PATTERN.findall(text))
    counts = Counter(w for w in words if len(w) > 2 and w not in STOPWORDS)
    return [word for word, _ in counts.most_common(limit)]


def build_summary(text: str, max_sentences: int = 5) -> str:
    """Take the first few substantial sentences as an extractive summary."""
    sentences = [s.strip() for s in SENTENCE_SPLIT.split(text) if len(s.strip()) > 20]
    sentences = sentences[:max_sentences]
    if not sentences:
        return "No summary available."
    return ". ".join(sentences) + "."
