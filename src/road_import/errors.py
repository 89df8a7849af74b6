"""Exceptions that abort a request.  Everything else is carried as data."""
from __future__ import annotations


class UpstreamUnavailable(RuntimeError):
    """The Overpass call failed, timed out or returned an unusable payload."""


class UnknownArea(ValueError):
    """The requested prefecture has no known bounding box."""


class ConfirmationRequired(RuntimeError):
    """A review-required candidate was approved without confirmation."""

    def __init__(self, name: str, max_segment_m: float):
        self.name = name
        self.max_segment_m = max_segment_m
        super().__init__(
            f"{name!r} has a {round(max_segment_m)} m straight segment; "
            "confirm before approving"
        )
