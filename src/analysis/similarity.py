"""Summary similarity scoring for duplicate ticket detection."""
import re
from dataclasses import dataclass

from src.jira.types import JiraIssue


# Pairs scoring at or above this are reported as duplicates
DUPLICATE_THRESHOLD = 0.6

_NON_WORD = re.compile(r"\W+")


@dataclass(frozen=True)
class SimilarityPair:
    """Two issues whose summaries overlap enough to be duplicates."""

    issue_key_a: str
    issue_key_b: str
    score: float


def tokenize(text: str) -> set[str]:
    """Lowercase text and split it into a set of word tokens."""
    return {token for token in _NON_WORD.split(text.lower()) if token}


def _jaccard(tokens_a: set[str], tokens_b: set[str]) -> float:
    union = tokens_a | tokens_b
    if not union:
        return 0.0
    return len(tokens_a & tokens_b) / len(union)


def similarity(text_a: str, text_b: str) -> float:
    """Jaccard index of the word sets of two texts.

    Returns 0.0 when neither text contains a word token.
    """
    return _jaccard(tokenize(text_a), tokenize(text_b))


def find_duplicates(
    issues: list[JiraIssue],
    threshold: float = DUPLICATE_THRESHOLD,
) -> list[SimilarityPair]:
    """Compare every unordered pair of issue summaries.

    Pairs come out in enumeration order (first index ascending, then second),
    never sorted by score.

    Args:
        issues: Issues to compare, in the order returned by the search.
        threshold: Minimum score for a pair to be reported.

    Returns:
        Pairs scoring at or above the threshold.
    """
    token_sets = [tokenize(issue.summary) for issue in issues]
    duplicates = []
    for i in range(len(issues)):
        for j in range(i + 1, len(issues)):
            score = _jaccard(token_sets[i], token_sets[j])
            if score >= threshold:
                duplicates.append(
                    SimilarityPair(
                        issue_key_a=issues[i].key,
                        issue_key_b=issues[j].key,
                        score=score,
                    )
                )
    return duplicates


def format_duplicates_table(pairs: list[SimilarityPair]) -> str:
    """Render duplicate pairs as a Markdown table."""
    lines = [
        "Duplicate Tickets:",
        "| Ticket 1 | Ticket 2 | Similarity Score |",
        "|----------|----------|------------------|",
    ]
    for pair in pairs:
        lines.append(f"| {pair.issue_key_a} | {pair.issue_key_b} | {pair.score:.2f} |")
    return "\n".join(lines) + "\n"
