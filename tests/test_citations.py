"""Citation line-range and evidence strategy tests."""

from __future__ import annotations

from argmap.citations import (
    KeywordCitationStrategy,
    LineRange,
    PremiseEvidence,
    citation_anchor,
    cited_lines,
    enrich_premises,
    format_line_ranges,
    parse_line_ranges,
)
from argmap.schemas import AnalysisResult, Citation, Premise, Theory

SOURCE = "All humans are mortal.\nSocrates is a human.\nThe sky is blue."


def _result() -> AnalysisResult:
    return AnalysisResult(
        premises=[
            Premise(id="p1", text="Socrates is a human", type="assumption"),
            Premise(
                id="p2",
                text="The sky is blue",
                type="axiom",
                citations=[Citation(line_range="9", text="kept")],
            ),
            Premise(id="conclusion", text="Unrelated claim", type="conclusion"),
        ],
        connections=[],
        conclusion="Unrelated claim",
        source_text=SOURCE,
    )


def test_parse_line_ranges() -> None:
    assert parse_line_ranges("12-14, 20") == [LineRange(12, 14), LineRange(20, 20)]


def test_parse_line_ranges_tolerates_junk() -> None:
    assert parse_line_ranges("5-x, abc, , 3") == [LineRange(5, 5), LineRange(3, 3)]
    assert parse_line_ranges("") == []
    assert parse_line_ranges("9-4") == [LineRange(9, 9)]


def test_citation_anchor_is_left_side_of_first_range() -> None:
    assert citation_anchor("142-143, 148-151") == 142
    assert citation_anchor("nothing") is None


def test_cited_lines_are_one_based_and_clipped() -> None:
    assert cited_lines(SOURCE, "2") == ["Socrates is a human."]
    assert cited_lines(SOURCE, "0-1, 3-10") == ["All humans are mortal.", "The sky is blue."]


def test_format_line_ranges() -> None:
    assert format_line_ranges([9, 3, 4, 5]) == "3-5, 9"
    assert format_line_ranges([]) == ""


def test_keyword_strategy_cites_matching_lines() -> None:
    evidence = KeywordCitationStrategy()(_result().premises[0], SOURCE)
    assert [(c.line_range, c.text) for c in evidence.citations] == [("2", "Socrates is a human.")]
    assert evidence.supporting_theories == []


def test_enrich_fills_only_empty_slots() -> None:
    result = _result()
    enriched = enrich_premises(result, KeywordCitationStrategy())
    assert enriched.premises[0].citations[0].line_range == "2"
    assert enriched.premises[1].citations[0].text == "kept"
    assert enriched.premises[2].citations == []
    assert result.premises[0].citations == [], "original result must not change"


def test_enrich_accepts_any_strategy() -> None:
    def theories(premise: Premise, source_text: str) -> PremiseEvidence:
        return PremiseEvidence(supporting_theories=[Theory(name=f"T-{premise.id}")])

    enriched = enrich_premises(_result(), theories)
    assert [p.supporting_theories[0].name for p in enriched.premises] == ["T-p1", "T-p2", "T-conclusion"]


def test_enrichment_is_deterministic() -> None:
    first = enrich_premises(_result(), KeywordCitationStrategy())
    second = enrich_premises(_result(), KeywordCitationStrategy())
    assert first.model_dump() == second.model_dump()
