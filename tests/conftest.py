"""Shared fixtures: World Bank payloads and a recording mock transport."""

import json

import httpx
import pytest


def _obs(year, value, country="Canada", indicator="Population, total"):
    return {
        "indicator": {"id": "SP.POP.TOTL", "value": indicator},
        "country": {"id": "CA", "value": country},
        "countryiso3code": "CAN",
        "date": year,
        "value": value,
        "unit": "",
        "obs_status": "",
        "decimal": 0,
    }


@pytest.fixture
def make_obs():
    return _obs


@pytest.fixture
def worldbank_payload():
    """Payload shaped like the real API: [paging, observations]."""
    return [
        {"page": 1, "pages": 1, "per_page": 10, "total": 3},
        [
            _obs("2020", 38037204),
            _obs("2019", None),
            _obs("2018", 37065084),
        ],
    ]


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler):
        self.requests = []

        def _record(request):
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


@pytest.fixture
def json_transport():
    def _factory(payload, status_code=200):
        return RecordingTransport(
            lambda request: httpx.Response(
                status_code,
                content=json.dumps(payload).encode(),
                headers={"Content-Type": "application/json"},
            )
        )
    return _factory


@pytest.fixture
def store_data_file(tmp_path):
    data = {
        "categories": ["Jewelry", "Candles"],
        "products": [
            {
                "name": "Silver Ring",
                "category": "Jewelry",
                "price": 35,
                "description": "Plain band",
                "picture": "https://example.com/ring.jpg",
                "sku": "internal-001",
            },
            {
                "name": "Vanilla Candle",
                "category": "Candles",
                "price": 12.5,
                "description": "Soy wax",
                "picture": "https://example.com/candle.jpg",
            },
        ],
        "discountPolicy": {"tiers": [{"minOrderAmount": 100, "discountPercent": 5}]},
    }
    path = tmp_path / "store-data.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path
