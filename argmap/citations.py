"""Citation line ranges and deterministic evidence attachment."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from .schemas import AnalysisResult, Citation, Premise, Theory

_STOPWORDS = {
    "the", "and", "for", "are", "was", "that", "with", "from", "this",
    "all", "not", "but", "therefore", "thus", "must", "can", "its", "has",
}


@dataclass(frozen=True)
class LineRange:
    start: int
    end: int

    def __contains__(self, line: int) -> bool:
        return self.start <= line <= self.end


def parse_line_ranges(value: str) -> List[LineRange]:
    """Parse ``"12-14, 20"`` into ranges; the left side of ``-`` is the anchor."""
    ranges: List[LineRange] = []
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        left, _, right = part.partition("-")
        try:
            start = int(left.strip())
        except ValueError:
            continue
        try:
            end = int(right.strip()) if right.strip() else start
        except ValueError:
            end = start
        ranges.append(LineRange(start=start, end=max(start, end)))
    return ranges


def citation_anchor(line_range: str) -> Optional[int]:
    """Line a viewer should scroll to for this citation."""
    ranges = parse_line_ranges(line_range)
    return ranges[0].start if ranges else None


def cited_lines(source_text: str, line_range: str) -> List[str]:
    """Return the 1-based source lines covered by ``line_range``."""
    lines = source_text.splitlines()
    selected: List[str] = []
    for rng in parse_line_ranges(line_range):
        start = max(rng.start, 1)
        end = min(rng.end, len(lines))
        selected.extend(lines[start - 1 : end])
    return selected


def format_line_ranges(line_numbers: List[int]) -> str:
    """Collapse sorted line numbers into the ``"3-5, 9"`` form."""
    parts: List[str] = []
    numbers = sorted(set(line_numbers))
    idx = 0
    while idx < len(numbers):
        start = end = numbers[idx]
        while idx + 1 < len(numbers) and numbers[idx + 1] == end + 1:
            idx += 1
            end = numbers[idx]
        parts.append(str(start) if start == end else f"{start}-{end}")
        idx += 1
    return ", ".join(parts)


@dataclass
class PremiseEvidence:
    citations: List[Citation] = field(default_factory=list)
    supporting_theories: List[Theory] = field(default_factory=list)


class CitationStrategy(Protocol):
    def __call__(self, premise: Premise, source_text: str) -> PremiseEvidence:
        ...


def _keywords(text: str) -> set[str]:
    tokens = re.findall(r"\b\w{3,}\b", text.lower())
    return {t for t in tokens if t not in _STOPWORDS}


class KeywordCitationStrategy:
    """Cite the source lines sharing the most keywords with a premise."""

    def __init__(self, min_overlap: float = 0.5, max_lines: int = 3) -> None:
        self.min_overlap = min_overlap
        self.max_lines = max_lines

    def __call__(self, premise: Premise, source_text: str) -> PremiseEvidence:
        wanted = _keywords(premise.text)
        if not wanted or not source_text:
            return PremiseEvidence()
        scored = []
        for number, line in enumerate(source_text.splitlines(), start=1):
            overlap = len(wanted & _keywords(line)) / len(wanted)
            if overlap >= self.min_overlap:
                scored.append((-overlap, number))
        scored.sort()
        chosen = sorted(number for _score, number in scored[: self.max_lines])
        if not chosen:
            return PremiseEvidence()
        line_range = format_line_ranges(chosen)
        quote = " ".join(line.strip() for line in cited_lines(source_text, line_range))
        return PremiseEvidence(citations=[Citation(line_range=line_range, text=quote)])


def enrich_premises(result: AnalysisResult, strategy: CitationStrategy) -> AnalysisResult:
    """Return a copy of ``result`` with evidence from ``strategy`` attached.

    Premises that already carry citations or theories keep them; the strategy
    only fills empty slots.
    """
    source_text = result.source_text or ""
    premises: List[Premise] = []
    for premise in result.premises:
        evidence = strategy(premise, source_text)
        updates = {}
        if not premise.citations and evidence.citations:
            updates["citations"] = list(evidence.citations)
        if not premise.supporting_theories and evidence.supporting_theories:
            updates["supporting_theories"] = list(evidence.supporting_theories)
        premises.append(premise.model_copy(update=updates) if updates else premise)
    return result.model_copy(update={"premises": premises})
