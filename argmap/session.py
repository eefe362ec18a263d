"""Request-scoped analysis state guarded by a generation token."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional

from .citations import CitationStrategy, enrich_premises
from .errors import ArgmapError
from .pipeline import build_argument_map
from .schemas import ArgumentMap, Connection
from .utils import configure_logging

configure_logging()
logger = logging.getLogger(__name__)

FetchResponse = Callable[[str], Awaitable[Any]]


@dataclass
class AnalysisState:
    generation: int = 0
    argument_map: Optional[ArgumentMap] = None
    error: Optional[str] = None
    selected_premise: Optional[str] = None


class AnalysisSession:
    """Holds the latest analysis and discards responses from superseded requests."""

    def __init__(
        self,
        reject_cycles: Optional[bool] = None,
        citation_strategy: Optional[CitationStrategy] = None,
    ) -> None:
        self.reject_cycles = reject_cycles
        self.citation_strategy = citation_strategy
        self._generation = 0
        self.state = AnalysisState()

    @property
    def generation(self) -> int:
        return self._generation

    def begin(self) -> int:
        self._generation += 1
        return self._generation

    def is_current(self, token: int) -> bool:
        return token == self._generation

    def apply(self, token: int, raw: Any, source_text: Optional[str] = None) -> Optional[ArgumentMap]:
        """Run the pipeline on ``raw`` and publish it if ``token`` is still current."""
        if not self.is_current(token):
            logger.debug("Discarding stale response for generation %d", token)
            return None
        try:
            argument_map = build_argument_map(raw, reject_cycles=self.reject_cycles)
        except ArgmapError as exc:
            self._fail(token, exc)
            raise
        result = argument_map.result
        if source_text and not result.source_text:
            result = result.model_copy(update={"source_text": source_text})
        if self.citation_strategy is not None:
            result = enrich_premises(result, self.citation_strategy)
        if result is not argument_map.result:
            argument_map = argument_map.model_copy(update={"result": result})
        self.state = AnalysisState(generation=token, argument_map=argument_map)
        return argument_map

    async def analyze(self, text: str, fetch: FetchResponse) -> Optional[ArgumentMap]:
        """Fetch a model response for ``text`` and publish the resulting map.

        Returns ``None`` when a newer request (or a reset) superseded this one
        while the response was in flight.
        """
        token = self.begin()
        try:
            raw = await fetch(text)
        except Exception as exc:
            if not self.is_current(token):
                logger.debug("Discarding stale failure for generation %d: %s", token, exc)
                return None
            self._fail(token, exc)
            raise
        return self.apply(token, raw, source_text=text)

    def _fail(self, token: int, exc: Exception) -> None:
        logger.error("Analysis %d failed: %s", token, exc)
        self.state = AnalysisState(generation=token, error=str(exc))

    def reset(self) -> None:
        self._generation += 1
        self.state = AnalysisState(generation=self._generation)

    def select_premise(self, premise_id: Optional[str]) -> None:
        argument_map = self.state.argument_map
        if premise_id is not None and (
            argument_map is None or argument_map.result.get_premise(premise_id) is None
        ):
            raise KeyError(premise_id)
        self.state.selected_premise = premise_id

    def highlighted_connections(self) -> List[Connection]:
        argument_map = self.state.argument_map
        selected = self.state.selected_premise
        if argument_map is None or selected is None:
            return []
        return connections_for_premise(argument_map.result.connections, selected)


def connections_for_premise(connections: List[Connection], premise_id: str) -> List[Connection]:
    """Connections entering or leaving ``premise_id``, in their original order."""
    return [
        connection
        for connection in connections
        if connection.source == premise_id or connection.target == premise_id
    ]
