from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from road_import.contracts.route_contract import Coordinate, ImportCandidate


class RoutePoint(BaseModel):
    lat: float
    lng: float

    @classmethod
    def from_coordinate(cls, c: Coordinate) -> RoutePoint:
        return cls(lat=c.latitude, lng=c.longitude)


def route_points(coords: Optional[Sequence[Coordinate]]) -> Optional[List[RoutePoint]]:
    if coords is None:
        return None
    return [RoutePoint.from_coordinate(c) for c in coords]


class RoadRecord(BaseModel):
    """One row for the bulk insert into ``roads``."""

    name: str = Field(..., min_length=1)
    description: str = ""
    latitude: float
    longitude: float

    # Full geometry only when the road has more than one point
    route: Optional[List[RoutePoint]] = None

    # Reviewer acknowledged a long straight segment on this route
    confirmed: bool = False

    @property
    def has_geometry(self) -> bool:
        return self.route is not None and len(self.route) > 1

    def coordinates(self) -> List[Coordinate]:
        return [Coordinate(latitude=p.lat, longitude=p.lng) for p in self.route or []]

    def to_row(self, user_id: Optional[str] = None) -> Dict[str, Any]:
        row: Dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "route": [p.model_dump() for p in self.route] if self.has_geometry else None,
        }
        if user_id:
            row["user_id"] = user_id
        return row


class RoadCandidateOut(BaseModel):
    id: str
    name: str
    description: str
    latitude: float
    longitude: float
    tags: Dict[str, str] = {}
    route: Optional[List[RoutePoint]] = None
    has_long_segments: bool = False
    review_required: bool = False
    max_segment_distance: int = 0
    total_distance: int = 0

    @classmethod
    def from_candidate(cls, c: ImportCandidate) -> RoadCandidateOut:
        return cls(
            id=c.combined_id,
            name=c.display_name,
            description=c.description_text,
            latitude=c.anchor_latitude,
            longitude=c.anchor_longitude,
            tags=dict(c.tags),
            route=route_points(c.route),
            has_long_segments=c.metrics.has_anomalous_segment,
            review_required=c.review_required,
            # Rounded for display only; the threshold used the raw value
            max_segment_distance=round(c.metrics.max_segment_m),
            total_distance=round(c.metrics.total_distance_m),
        )
