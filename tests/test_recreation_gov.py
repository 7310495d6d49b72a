import json
from datetime import date

import pytest
import requests
import responses as resp_mock

from adapters.fixture import FixtureAdapter
from adapters.recreation_gov import RecreationGovAdapter, parse_month
from errors import FetchError

AVAIL_BASE = "https://www.recreation.gov/api/camps/availability/campground"

MONTH = {
    "campsites": {
        "site_123": {
            "site": "001",
            "campsite_type": "STANDARD NONELECTRIC",
            "availabilities": {
                "2024-03-05T00:00:00Z": "Available",
                "2024-03-06T00:00:00Z": "Reserved",
            },
        },
        "site_456": {
            "availabilities": {},
        },
    }
}


@pytest.fixture
def adapter():
    return RecreationGovAdapter(timeout=5)


@resp_mock.activate
def test_fetch_requests_first_of_month(adapter):
    resp_mock.add(resp_mock.GET, f"{AVAIL_BASE}/232447/month", json=MONTH, status=200)

    adapter.get_month_availability("232447", date(2024, 3, 1))

    assert len(resp_mock.calls) == 1
    assert "start_date=2024-03-01T00%3A00%3A00.000Z" in resp_mock.calls[0].request.url


@resp_mock.activate
def test_fetch_decodes_sites(adapter):
    resp_mock.add(resp_mock.GET, f"{AVAIL_BASE}/232447/month", json=MONTH, status=200)

    sites = adapter.get_month_availability("232447", date(2024, 3, 1))

    assert set(sites) == {"site_123", "site_456"}
    site = sites["site_123"]
    assert site.site_id == "site_123"
    assert site.name == "001"
    assert site.site_type == "STANDARD NONELECTRIC"
    assert site.availabilities == {date(2024, 3, 5): "Available", date(2024, 3, 6): "Reserved"}
    assert sites["site_456"].name == "Site site_456"
    assert sites["site_456"].availabilities == {}


@resp_mock.activate
def test_fetch_server_error_raises(adapter):
    resp_mock.add(resp_mock.GET, f"{AVAIL_BASE}/232447/month", status=500)

    with pytest.raises(FetchError):
        adapter.get_month_availability("232447", date(2024, 3, 1))


@resp_mock.activate
def test_fetch_invalid_json_raises(adapter):
    resp_mock.add(resp_mock.GET, f"{AVAIL_BASE}/232447/month", body="<html>busy</html>", status=200)

    with pytest.raises(FetchError):
        adapter.get_month_availability("232447", date(2024, 3, 1))


@resp_mock.activate
def test_fetch_timeout_raises(adapter):
    resp_mock.add(resp_mock.GET, f"{AVAIL_BASE}/232447/month", body=requests.Timeout("slow"))

    with pytest.raises(FetchError):
        adapter.get_month_availability("232447", date(2024, 3, 1))


def test_parse_month_without_campsites_is_empty():
    assert parse_month({}) == {}


def test_parse_month_bad_date_key_raises():
    with pytest.raises(FetchError):
        parse_month({"campsites": {"1": {"availabilities": {"soon": "Available"}}}})


def test_parse_month_non_object_raises():
    with pytest.raises(FetchError):
        parse_month(["campsites"])


# ── Fixture adapter ────────────────────────────────────────────────────────────

def test_fixture_adapter_reads_saved_month(tmp_path):
    path = tmp_path / "month.json"
    path.write_text(json.dumps(MONTH))

    sites = FixtureAdapter(str(path)).get_month_availability("232447", date(2024, 3, 1))

    assert sites["site_123"].availabilities[date(2024, 3, 5)] == "Available"


def test_fixture_adapter_missing_file_raises(tmp_path):
    with pytest.raises(FetchError):
        FixtureAdapter(str(tmp_path / "nope.json")).get_month_availability("232447", date(2024, 3, 1))


@resp_mock.activate
def test_fetch_campsites_not_an_object_raises(adapter):
    resp_mock.add(resp_mock.GET, f"{AVAIL_BASE}/232447/month", json={"campsites": ["x"]}, status=200)

    with pytest.raises(FetchError):
        adapter.get_month_availability("232447", date(2024, 3, 1))
