# path: road-import/src/road_import/contracts/route_contract.py

from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


def _freeze(obj, **fields) -> None:
    # frozen dataclasses only allow assignment through object.__setattr__
    for name, value in fields.items():
        object.__setattr__(obj, name, value)


def _tags(value: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(value))


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class Fragment:
    source_id: str
    geometry: Tuple[Coordinate, ...]
    tags: Mapping[str, str] = field(default_factory=dict, hash=False)
    name: Optional[str] = None
    ref: Optional[str] = None

    def __post_init__(self) -> None:
        _freeze(self, geometry=tuple(self.geometry), tags=_tags(self.tags))


@dataclass(frozen=True)
class FragmentGroup:
    key: str  # resolved display name shared by every fragment
    fragments: Tuple[Fragment, ...]

    def __post_init__(self) -> None:
        _freeze(self, fragments=tuple(self.fragments))


@dataclass(frozen=True)
class StitchedRoute:
    name: str
    points: Tuple[Coordinate, ...]
    merged_tags: Mapping[str, str] = field(hash=False)
    source_ids: Tuple[str, ...]
    dropped_fragment_ids: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        _freeze(
            self,
            points=tuple(self.points),
            merged_tags=_tags(self.merged_tags),
            source_ids=tuple(self.source_ids),
            dropped_fragment_ids=tuple(self.dropped_fragment_ids),
        )


@dataclass(frozen=True)
class RouteMetrics:
    total_distance_m: float
    max_segment_m: float
    has_anomalous_segment: bool


@dataclass(frozen=True)
class ImportCandidate:
    display_name: str
    description_text: str
    anchor_latitude: float
    anchor_longitude: float
    route: Optional[Tuple[Coordinate, ...]]
    metrics: RouteMetrics
    source_ids: Tuple[str, ...] = ()
    tags: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        _freeze(
            self,
            route=tuple(self.route) if self.route is not None else None,
            source_ids=tuple(self.source_ids),
            tags=_tags(self.tags),
        )

    @property
    def review_required(self) -> bool:
        """Long straight jumps need an explicit confirmation before import."""
        return self.metrics.has_anomalous_segment

    @property
    def combined_id(self) -> str:
        return "-".join(self.source_ids)
