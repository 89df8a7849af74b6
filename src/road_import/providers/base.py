from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class RoadSource(ABC):
    """Fetch raw unpaved-road way elements (Overpass ``out geom`` shape)."""

    @abstractmethod
    def fetch_elements(self, prefecture: str, city: Optional[str] = None) -> List[Dict[str, Any]]:
        raise NotImplementedError
