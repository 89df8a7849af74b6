from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

from rich.console import Console
from rich.table import Table

from road_import.core.engine import run_import
from road_import.core.models import RoadCandidateOut
from road_import.db import fetch_existing_names, get_supabase
from road_import.errors import UnknownArea, UpstreamUnavailable
from road_import.providers.base import RoadSource
from road_import.providers.mock import StaticRoadSource
from road_import.providers.overpass import OverpassRoadSource


def _read_names(path: Path) -> List[str]:
    lines = path.read_text(encoding="utf-8").splitlines()
    return [ln.strip() for ln in lines if ln.strip()]


def _save_json(path: Path, obj) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(obj, indent=2, ensure_ascii=False), encoding="utf-8")


def _existing_names(args) -> List[str]:
    if args.existing:
        return _read_names(Path(args.existing))
    sb = get_supabase()
    return fetch_existing_names(sb) if sb is not None else []


def main(argv: List[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Preview unpaved roads ready for import")
    ap.add_argument("--prefecture", required=True, help="e.g. 長野県")
    ap.add_argument("--city", default=None, help="Restrict to one municipality")
    ap.add_argument("--fixture", default=None, help="Overpass JSON file to use instead of the API")
    ap.add_argument("--existing", default=None, help="Text file of already-imported names, one per line")
    ap.add_argument("--json", dest="json_out", default=None, help="Write candidates to this JSON file")
    ap.add_argument("--debug", action="store_true")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s [road_import] %(levelname)s %(message)s",
    )

    source: RoadSource = (
        StaticRoadSource.from_file(args.fixture) if args.fixture else OverpassRoadSource()
    )

    console = Console()
    try:
        result = run_import(source, args.prefecture, _existing_names(args), city=args.city)
    except (UnknownArea, UpstreamUnavailable) as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1

    table = Table(title=f"Import candidates — {args.prefecture} {args.city or ''}".strip())
    table.add_column("Name")
    table.add_column("Start")
    table.add_column("Points", justify="right")
    table.add_column("Total m", justify="right")
    table.add_column("Max seg m", justify="right")
    table.add_column("Review")
    table.add_column("Description")

    rows = [RoadCandidateOut.from_candidate(c) for c in result.candidates]
    for r in rows:
        table.add_row(
            r.name,
            f"{r.latitude:.5f}, {r.longitude:.5f}",
            str(len(r.route) if r.route else 1),
            str(r.total_distance),
            str(r.max_segment_distance),
            "[yellow]check[/yellow]" if r.review_required else "",
            r.description,
        )

    console.print(table)
    console.print(
        f"{len(rows)} candidates, {result.review_required_count} need review, "
        f"{result.duplicates} already imported, {result.too_short} too short"
    )
    if result.dropped_fragment_ids:
        console.print(f"Unconnected fragments: {', '.join(result.dropped_fragment_ids)}")

    if args.json_out:
        out = Path(args.json_out)
        _save_json(out, [r.model_dump() for r in rows])
        console.print(f"Saved: {out.resolve()}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
