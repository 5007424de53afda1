"""Tests for normalize_observations: shape tolerance, null filtering, limits."""

import pytest

from opendata_store.normalize import clamp_limit, normalize_observations


class TestClampLimit:

    @pytest.mark.parametrize("limit, expected", [(0, 1), (-5, 1), (1, 1), (10, 10), (20, 20), (50, 20)])
    def test_clamps_into_range(self, limit, expected):
        assert clamp_limit(limit) == expected


class TestNormalizeObservations:

    def test_drops_null_values_and_keeps_order(self, worldbank_payload):
        rows = normalize_observations(worldbank_payload, "CAN", "SP.POP.TOTL", 10)
        assert [r.year for r in rows] == ["2020", "2018"]
        assert rows[0].value == 38037204
        assert rows[0].country == "Canada"
        assert rows[0].indicator == "Population, total"

    @pytest.mark.parametrize("payload", [
        None,
        {"message": "Invalid value"},
        "not json at all",
        [],
        [{"page": 1}],
        [{"page": 1}, None],
        [{"page": 1}, {"date": "2020"}],
    ])
    def test_structural_mismatch_yields_empty(self, payload):
        assert normalize_observations(payload, "CAN", "SP.POP.TOTL", 10) == []

    def test_falsy_and_non_mapping_entries_are_skipped(self, make_obs):
        payload = [{}, [None, {}, 0, "x", make_obs("2021", 5)]]
        rows = normalize_observations(payload, "CAN", "SP.POP.TOTL", 10)
        assert [r.year for r in rows] == ["2021"]

    def test_missing_labels_fall_back_to_requested_codes(self):
        payload = [{}, [{"date": "2020", "value": 1.5}, {"date": "2019", "value": 2, "country": {"value": None}}]]
        rows = normalize_observations(payload, "FRA", "NY.GDP.MKTP.CD", 10)
        assert rows[0].country == "FRA"
        assert rows[0].indicator == "NY.GDP.MKTP.CD"
        assert rows[1].country == "FRA"

    def test_missing_value_key_is_kept_as_empty(self):
        payload = [{}, [{"date": "2020"}, {"date": "2019", "value": 3}]]
        rows = normalize_observations(payload, "CAN", "SP.POP.TOTL", 10)
        assert [r.year for r in rows] == ["2020", "2019"]
        assert rows[0].value is None

    def test_zero_is_a_value_not_null(self, make_obs):
        payload = [{}, [make_obs("2020", 0)]]
        rows = normalize_observations(payload, "CAN", "SP.POP.TOTL", 10)
        assert len(rows) == 1
        assert rows[0].value == 0

    def test_truncates_to_clamped_limit(self, make_obs):
        payload = [{}, [make_obs(str(y), y) for y in range(2000, 2030)]]
        assert len(normalize_observations(payload, "CAN", "X.Y.Z", 3)) == 3
        assert len(normalize_observations(payload, "CAN", "X.Y.Z", 50)) == 20
        assert len(normalize_observations(payload, "CAN", "X.Y.Z", 0)) == 1
