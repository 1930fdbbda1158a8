import math

import pytest
import requests

from nearby import config
from nearby.errors import InvalidSearchRequest, NearbyError, ProviderError
from nearby.geo import EARTH_RADIUS_M
from nearby.models import RawRecord
from nearby.http import RequestMetrics
from nearby.service import default_client, parse_search_params, search_nearby, validate_search_params

METERS_PER_DEG_LAT = EARTH_RADIUS_M * math.pi / 180


class FakeSource:
    def __init__(self, records=None, error=None):
        self.records = records or []
        self.error = error
        self.calls = []

    def fetch(self, lat, lon, radius):
        self.calls.append((lat, lon, radius))
        if self.error is not None:
            raise self.error
        return self.records


def test_validate_defaults_radius():
    params = validate_search_params(51.5, -0.12, None)
    assert params.radius == config.DEFAULT_RADIUS_M


@pytest.mark.parametrize(
    "lat, lon, radius",
    [
        (None, 0.0, 1000),
        (1.0, None, 1000),
        ("abc", 0.0, 1000),
        (float("nan"), 0.0, 1000),
        (0.0, float("inf"), 1000),
        (91.0, 0.0, 1000),
        (0.0, -181.0, 1000),
        (0.0, 0.0, 0),
        (0.0, 0.0, -5),
        (0.0, 0.0, 12.5),
        (0.0, 0.0, "wide"),
        (0.0, 0.0, True),
        (0.0, 0.0, 10_000_000),
    ],
)
def test_validate_rejects_bad_params(lat, lon, radius):
    with pytest.raises(InvalidSearchRequest):
        validate_search_params(lat, lon, radius)


def test_invalid_request_is_a_value_error():
    assert issubclass(InvalidSearchRequest, ValueError)
    assert issubclass(InvalidSearchRequest, NearbyError)
    assert issubclass(ProviderError, NearbyError)


def test_parse_search_params_from_query_strings():
    params = parse_search_params({"lat": "51.5074", "lon": "-0.1278", "radius": " 1500 "})
    assert (params.lat, params.lon, params.radius) == (51.5074, -0.1278, 1500)
    assert parse_search_params({"lat": "0", "lon": "0", "radius": ""}).radius == config.DEFAULT_RADIUS_M


def test_parse_search_params_requires_coordinates():
    with pytest.raises(InvalidSearchRequest):
        parse_search_params({"lat": "", "lon": "1"})
    with pytest.raises(InvalidSearchRequest):
        parse_search_params({"lon": "1"})


def test_search_nearby_runs_pipeline():
    record = RawRecord(
        id=1,
        kind="node",
        lat=51.5 + 200 / METERS_PER_DEG_LAT,
        lon=-0.12,
        tags={"amenity": "pharmacy", "name": "Boots"},
    )
    source = FakeSource([record])
    result = search_nearby("51.5", "-0.12", "1000", client=source)

    assert source.calls == [(51.5, -0.12, 1000)]
    assert [p.id for p in result.places] == ["node_1"]
    assert result.to_dict()["radius"] == 1000


def test_search_nearby_validates_before_fetching():
    source = FakeSource()
    with pytest.raises(InvalidSearchRequest):
        search_nearby(None, 0.0, client=source)
    assert source.calls == []


def test_search_nearby_wraps_fetch_failures():
    source = FakeSource(error=requests.ConnectionError("offline"))
    with pytest.raises(ProviderError) as excinfo:
        search_nearby(51.5, -0.12, 1000, client=source)
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)


def test_search_nearby_passes_provider_errors_through():
    error = ProviderError("Overpass request failed")
    with pytest.raises(ProviderError) as excinfo:
        search_nearby(51.5, -0.12, 1000, client=FakeSource(error=error))
    assert excinfo.value is error


def test_default_client_counts_requests():
    client = default_client()
    assert isinstance(client.http.metrics, RequestMetrics)
    assert client.http.metrics.network_requests == 0
