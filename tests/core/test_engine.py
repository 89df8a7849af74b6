from unittest.mock import MagicMock

import pytest

from road_import.config import Settings
from road_import.contracts.route_contract import Coordinate
from road_import.core.engine import run_import, run_pipeline
from road_import.core.grouping import fragments_from_elements
from road_import.errors import UpstreamUnavailable
from road_import.providers.mock import StaticRoadSource


def way(wid, pts, **tags):
    return {
        "id": wid,
        "geometry": [{"lat": lat, "lon": lon} for lat, lon in pts],
        "tags": tags,
    }


FOREST_ROAD_A = [
    way(1, [(35.0, 139.0), (35.001, 139.001)], name="Forest Road A", surface="dirt"),
    way(2, [(35.002, 139.002), (35.001, 139.001)], name="Forest Road A", tracktype="grade3"),
]


def test_forest_road_a_end_to_end():
    result = run_pipeline(fragments_from_elements(FOREST_ROAD_A), [])
    assert len(result.candidates) == 1
    c = result.candidates[0]
    assert c.display_name == "Forest Road A"
    assert (c.anchor_latitude, c.anchor_longitude) == (35.0, 139.0)
    assert c.route is not None
    # fragment 2 is reversed; the shared joint appears once per fragment
    assert c.route == (
        Coordinate(35.0, 139.0),
        Coordinate(35.001, 139.001),
        Coordinate(35.001, 139.001),
        Coordinate(35.002, 139.002),
    )
    assert list(dict.fromkeys(c.route)) == [
        Coordinate(35.0, 139.0),
        Coordinate(35.001, 139.001),
        Coordinate(35.002, 139.002),
    ]
    assert c.description_text == "Surface: dirt, Track type: grade3"
    assert c.combined_id == "1-2"
    # each 0.001 degree diagonal step is ~143 m
    assert c.review_required is True
    assert result.groups == 1
    assert result.fragments_in == 2


def test_pipeline_counters_and_existing_names():
    elements = FOREST_ROAD_A + [
        way(3, [(36.0, 140.0), (36.01, 140.0)], name="Known Road"),
        way(4, [(36.5, 140.0), (36.5001, 140.0)], ref="R-9"),
        way(5, [], name="Empty"),
        way(6, [(37.0, 140.0), (37.01, 140.0)]),
    ]
    result = run_pipeline(fragments_from_elements(elements), ["  KNOWN road"])
    assert [c.display_name for c in result.candidates] == ["Forest Road A"]
    assert result.groups == 3
    assert result.duplicates == 1
    assert result.too_short == 1
    assert result.review_required_count == 1


def test_settings_drive_thresholds():
    cfg = Settings(max_results=1, min_total_distance_m=10.0, anomaly_threshold_m=200.0)
    elements = FOREST_ROAD_A + [way(4, [(36.5, 140.0), (36.5002, 140.0)], ref="R-9")]
    result = run_pipeline(fragments_from_elements(elements), [], cfg=cfg)
    assert len(result.candidates) == 1
    assert result.truncated == 1
    assert result.candidates[0].review_required is False


def test_empty_result_is_not_an_error():
    result = run_pipeline([], [])
    assert result.candidates == []
    assert result.review_required_count == 0


def test_run_import_with_static_source():
    result = run_import(StaticRoadSource({"elements": FOREST_ROAD_A}), "長野県", [])
    assert [c.display_name for c in result.candidates] == ["Forest Road A"]


def test_run_import_propagates_upstream_failure():
    source = MagicMock()
    source.fetch_elements.side_effect = UpstreamUnavailable("down")
    with pytest.raises(UpstreamUnavailable):
        run_import(source, "長野県", [])
