"""Event Catalog — tests for loading ticket types from events.json."""

import json
from decimal import Decimal
from pathlib import Path

from eventix.infrastructure.catalog import Catalog, parse_price

BUNDLED_EVENTS = Path(__file__).resolve().parents[2] / "data" / "events.json"


def _write(tmp_path, payload) -> Path:
    path = tmp_path / "events.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_parse_price_strips_sol_suffix():
    assert parse_price("0.10 SOL") == Decimal("0.10")
    assert parse_price("0.25sol") == Decimal("0.25")
    assert parse_price(0.05) == Decimal("0.05")


def test_bundled_catalog_loads():
    catalog = Catalog.from_file(BUNDLED_EVENTS)
    assert len(catalog) == 3
    item = catalog.get("summer-fest-2025")
    assert item.name == "Summer Music Festival"
    assert item.price == Decimal("0.10")
    assert item.seat == "GA-001"


def test_maps_event_fields(tmp_path):
    path = _write(tmp_path, {"events": [{
        "id": "gig", "title": "Gig", "venue": "Hall", "date": "2026-01-01",
        "price": "1.5 SOL", "image": "gig.png", "seat": "A-12",
    }]})
    item = Catalog.from_file(path).get("gig")
    assert (item.name, item.description, item.event_date) == (
        "Gig", "Hall", "2026-01-01",
    )
    assert item.price == Decimal("1.5")
    assert item.seat == "A-12"
    assert item.image == "gig.png"


def test_missing_file_gives_empty_catalog(tmp_path):
    catalog = Catalog.from_file(tmp_path / "missing.json")
    assert len(catalog) == 0
    assert catalog.get("summer-fest-2025") is None


def test_malformed_json_gives_empty_catalog(tmp_path):
    path = tmp_path / "events.json"
    path.write_text("{not json", encoding="utf-8")
    assert len(Catalog.from_file(path)) == 0


def test_malformed_entry_skipped(tmp_path):
    path = _write(tmp_path, {"events": [
        {"id": "ok", "title": "OK", "price": "0.1 SOL"},
        {"id": "no-title", "price": "0.1 SOL"},
        {"id": "bad-price", "title": "Bad", "price": "free"},
    ]})
    catalog = Catalog.from_file(path)
    assert [i.id for i in catalog.items()] == ["ok"]
