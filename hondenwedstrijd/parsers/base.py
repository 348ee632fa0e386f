from __future__ import annotations

from abc import ABC, abstractmethod

from hondenwedstrijd.parsers.element import Element
from hondenwedstrijd.schemas import Candidate


class BaseStrategy(ABC):
    """Base class for markup strategies.

    Strategies are purely extractive - they turn a content container into
    raw candidates without validating them. Date normalisation, status
    classification and rejection happen afterwards in the extractor, so a
    strategy never drops a row because its date looks odd.
    """

    name: str = ""

    @abstractmethod
    def extract(self, container: Element) -> list[Candidate]:
        """Return every candidate found in *container* (possibly none)."""
        ...
