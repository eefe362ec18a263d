"""Data models for premises, connections, and analysis results."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, get_args

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

CONCLUSION_ID = "conclusion"

PremiseType = Literal["axiom", "assumption", "intermediate", "conclusion"]
Strength = Literal["strong", "moderate", "weak"]

PREMISE_TYPES = get_args(PremiseType)
STRENGTHS = get_args(Strength)
DEFAULT_PREMISE_TYPE = "intermediate"
DEFAULT_STRENGTH = "moderate"


def coerce_id(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, str):
        return value.strip()
    return value


def lowered_label(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().lower()
    return value


class Citation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    line_range: str = Field(
        alias="lineRange",
        validation_alias=AliasChoices("lineRange", "lineNumbers", "line_range"),
    )
    text: str = ""


class Theory(BaseModel):
    name: str
    description: str = ""


class Premise(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    text: str = ""
    title: Optional[str] = None
    type: PremiseType
    citations: List[Citation] = Field(default_factory=list)
    supporting_theories: List[Theory] = Field(
        default_factory=list,
        alias="supportingTheories",
        validation_alias=AliasChoices("supportingTheories", "supporting_theories"),
    )
    child_assumptions: List[str] = Field(
        default_factory=list,
        alias="childAssumptions",
        validation_alias=AliasChoices("childAssumptions", "child_assumptions"),
    )

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, value: Any) -> Any:
        return coerce_id(value)

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value: Any) -> Any:
        return lowered_label(value)

    @field_validator("child_assumptions", mode="before")
    @classmethod
    def _normalize_children(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [coerce_id(item) for item in value]
        return value

    @property
    def is_conclusion(self) -> bool:
        return self.id == CONCLUSION_ID or self.type == "conclusion"

    @property
    def display_title(self) -> str:
        """Short label: the explicit title or the first 50 characters of the text."""
        return self.title or self.text[:50]


class Connection(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    source: str
    target: str
    strength: Strength = DEFAULT_STRENGTH

    @field_validator("id", "source", "target", mode="before")
    @classmethod
    def _normalize_endpoints(cls, value: Any) -> Any:
        return coerce_id(value)

    @field_validator("strength", mode="before")
    @classmethod
    def _normalize_strength(cls, value: Any) -> Any:
        value = lowered_label(value)
        return value if value in STRENGTHS else DEFAULT_STRENGTH

    @model_validator(mode="before")
    @classmethod
    def _default_id(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("id"):
            data = dict(data)
            data["id"] = f"{coerce_id(data.get('source'))}->{coerce_id(data.get('target'))}"
        return data


class AnalysisResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    premises: List[Premise]
    connections: List[Connection]
    conclusion: str
    source_text: Optional[str] = Field(
        default=None,
        alias="sourceText",
        validation_alias=AliasChoices("sourceText", "source_text"),
    )

    def premise_ids(self) -> List[str]:
        return [premise.id for premise in self.premises]

    def conclusion_premise(self) -> Optional[Premise]:
        for premise in self.premises:
            if premise.is_conclusion:
                return premise
        return None

    def get_premise(self, premise_id: str) -> Optional[Premise]:
        for premise in self.premises:
            if premise.id == premise_id:
                return premise
        return None


class NodePosition(BaseModel):
    level: int
    x: float
    y: float


class Diagnostic(BaseModel):
    kind: Literal[
        "dropped_connection",
        "synthesized_conclusion",
        "duplicate_conclusion",
        "cycle",
        "unreachable",
        "repaired_field",
    ]
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class ValidationReport(BaseModel):
    result: AnalysisResult
    diagnostics: List[Diagnostic] = Field(default_factory=list)

    def of_kind(self, kind: str) -> List[Diagnostic]:
        return [diag for diag in self.diagnostics if diag.kind == kind]


class ArgumentMap(BaseModel):
    """Validated graph plus per-node coordinates, handed to the rendering layer."""

    result: AnalysisResult
    layout: Dict[str, NodePosition]
    diagnostics: List[Diagnostic] = Field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "result": self.result.model_dump(by_alias=True, exclude_none=True),
            "layout": {node_id: pos.model_dump() for node_id, pos in self.layout.items()},
            "diagnostics": [diag.model_dump() for diag in self.diagnostics],
        }
