"""Human review of import candidates before they reach the bulk insert.

Each candidate starts ``pending``; the reviewer edits, approves or skips it.
Approving a candidate whose route has an anomalous straight segment needs an
explicit ``confirmed=True``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Literal, Optional, Tuple

from road_import.contracts.route_contract import ImportCandidate
from road_import.core.models import RoadRecord, route_points
from road_import.core.route import ANOMALY_THRESHOLD_M, route_metrics
from road_import.errors import ConfirmationRequired

log = logging.getLogger(__name__)

ReviewStatus = Literal["pending", "approved", "skipped"]


@dataclass
class ReviewItem:
    candidate: ImportCandidate
    status: ReviewStatus = "pending"
    edited_name: Optional[str] = None
    edited_description: Optional[str] = None

    @property
    def name(self) -> str:
        return self.edited_name or self.candidate.display_name

    @property
    def description(self) -> str:
        return self.edited_description or self.candidate.description_text

    def to_record(self) -> RoadRecord:
        c = self.candidate
        return RoadRecord(
            name=self.name,
            description=self.description,
            latitude=c.anchor_latitude,
            longitude=c.anchor_longitude,
            route=route_points(c.route),
            confirmed=self.status == "approved",
        )


class ReviewSession:
    def __init__(self, candidates: Iterable[ImportCandidate]):
        self.items: List[ReviewItem] = [ReviewItem(c) for c in candidates]

    @classmethod
    def from_records(
        cls, records: Iterable[RoadRecord], threshold_m: float = ANOMALY_THRESHOLD_M
    ) -> ReviewSession:
        """Rebuild candidates from submitted records, re-measuring each route."""
        candidates = []
        for rec in records:
            coords = rec.coordinates()
            candidates.append(
                ImportCandidate(
                    display_name=rec.name,
                    description_text=rec.description,
                    anchor_latitude=rec.latitude,
                    anchor_longitude=rec.longitude,
                    route=coords if len(coords) > 1 else None,
                    metrics=route_metrics(coords, threshold_m=threshold_m),
                )
            )
        return cls(candidates)

    def _gate(self, item: ReviewItem, confirmed: bool) -> None:
        c = item.candidate
        if c.review_required and not confirmed:
            raise ConfirmationRequired(c.display_name, c.metrics.max_segment_m)

    def approve(self, idx: int, confirmed: bool = False) -> ReviewItem:
        item = self.items[idx]
        self._gate(item, confirmed)
        item.status = "approved"
        return item

    def skip(self, idx: int) -> ReviewItem:
        item = self.items[idx]
        item.status = "skipped"
        return item

    def edit(
        self,
        idx: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        confirmed: bool = False,
    ) -> ReviewItem:
        """Store name/description overrides; saving an edit approves the item."""
        item = self.items[idx]
        self._gate(item, confirmed)
        if name is not None:
            item.edited_name = name.strip() or None
        if description is not None:
            item.edited_description = description.strip() or None
        item.status = "approved"
        return item

    @property
    def approved(self) -> List[ReviewItem]:
        return [i for i in self.items if i.status == "approved"]

    def approved_records(self) -> List[RoadRecord]:
        records = [i.to_record() for i in self.approved]
        log.info("%d of %d candidates approved for import", len(records), len(self.items))
        return records


def gate_records(
    records: Iterable[RoadRecord], threshold_m: float = ANOMALY_THRESHOLD_M
) -> Tuple[List[RoadRecord], List[Dict[str, str]]]:
    """Split submitted records into insertable ones and unconfirmed rejects.

    The submitted route is measured again; a client-side flag is not trusted.
    """
    records = list(records)
    session = ReviewSession.from_records(records, threshold_m=threshold_m)
    rejected: List[Dict[str, str]] = []
    for idx, rec in enumerate(records):
        try:
            session.approve(idx, confirmed=rec.confirmed)
        except ConfirmationRequired as e:
            log.warning("Rejected unconfirmed road %r: %s", rec.name, e)
            rejected.append({"road": rec.name, "error": str(e)})
    return session.approved_records(), rejected
