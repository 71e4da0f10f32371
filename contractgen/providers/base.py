"""Contract for type-information providers."""

from abc import ABC, abstractmethod
from typing import Sequence

from ..models import HostType


class TypeProvider(ABC):
    """Describes host types to the graph builder."""

    @abstractmethod
    def root_types(self) -> Sequence[object]:
        """Return the handles generation starts from, in a stable order."""

    @abstractmethod
    def describe(self, handle: object) -> HostType:
        """Return the structural description of ``handle``; raise ProviderError if unknown."""
