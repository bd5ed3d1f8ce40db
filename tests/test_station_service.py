# tests/test_station_service.py

"""Tests for the per-station zone view."""

import unittest
from datetime import datetime, timedelta, timezone
from typing import Any
from unittest.mock import MagicMock

from src.config.settings import Settings
from src.errors import DataSourceError
from src.models.station import Station, StationPrice
from src.services.station_service import (
    RELIABILITY_HIGH,
    RELIABILITY_LIMITED,
    RELIABILITY_LOW,
    StationService,
    keep_reliable_per_brand,
    merge_station_batches,
    reliability_level,
    sort_stations,
    zone_center,
)

_NOW = datetime(2024, 2, 20, tzinfo=timezone.utc)


def _row(
    company_id: int,
    code: int,
    price: Any,
    date: str,
    brand: str = "YPF",
    lat: str = "-34.57",
    lon: str = "-58.42",
) -> dict[str, Any]:
    """A station row as the aggregator returns it."""
    return {
        "idempresa": company_id,
        "cuit": "30-1",
        "empresabandera": brand,
        "direccion": f"Calle {company_id}",
        "lat": lat,
        "lon": lon,
        "razonsocial": f"Estacion {company_id}",
        "localidad": "PALERMO",
        "precios": {str(code): {"precio": price, "fechavigencia": date}},
    }


def _station(
    company_id: str,
    brand: str,
    prices: dict[int, tuple[str, str]],
    lat: str = "-34.57",
    lon: str = "-58.42",
) -> Station:
    """Station with {code: (date, reliability)} prices."""
    return Station(
        company_id=company_id,
        cuit="",
        brand=brand,
        address="",
        lat=lat,
        lon=lon,
        business_name="",
        locality="",
        prices={
            code: StationPrice(code, 1000.0, date, reliability, str(code))
            for code, (date, reliability) in prices.items()
        },
    )


class TestReliability(unittest.TestCase):
    """reliability_level thresholds."""

    def test_levels(self) -> None:
        self.assertEqual(reliability_level("2024-02-15", _NOW), RELIABILITY_HIGH)
        self.assertEqual(
            reliability_level("2024-01-15", _NOW), RELIABILITY_LIMITED
        )
        self.assertEqual(reliability_level("2023-10-01", _NOW), RELIABILITY_LOW)

    def test_boundaries(self) -> None:
        """Exactly 20 days is limited, exactly 75 days is low."""
        at_20 = (_NOW - timedelta(days=20)).isoformat()
        at_75 = (_NOW - timedelta(days=75)).isoformat()
        self.assertEqual(reliability_level(at_20, _NOW), RELIABILITY_LIMITED)
        self.assertEqual(reliability_level(at_75, _NOW), RELIABILITY_LOW)

    def test_missing_or_bad_date_is_low(self) -> None:
        self.assertEqual(reliability_level("", _NOW), RELIABILITY_LOW)
        self.assertEqual(reliability_level("yesterday", _NOW), RELIABILITY_LOW)


class TestZoneCenter(unittest.TestCase):
    """zone_center lookup."""

    def test_known_zone(self) -> None:
        self.assertEqual(zone_center("Sur"), Settings.ZONES["sur"])

    def test_unknown_and_missing_fall_back(self) -> None:
        default = Settings.ZONES[Settings.DEFAULT_ZONE]
        self.assertEqual(zone_center("atlantis"), default)
        self.assertEqual(zone_center(None), default)


class TestMergeStationBatches(unittest.TestCase):
    """merge_station_batches unit tests."""

    def test_merges_by_company_id(self) -> None:
        batches = [
            (2, [_row(1, 2, 950, "2024-02-15"), _row(2, 2, 960, "2024-02-14")]),
            (3, [_row(1, 3, 1100, "2024-02-15")]),
        ]
        stations = merge_station_batches(batches, now=_NOW)
        self.assertEqual([s.company_id for s in stations], ["1", "2"])
        self.assertEqual(sorted(stations[0].prices), [2, 3])
        self.assertEqual(stations[0].prices[3].name, "INFINIA")
        self.assertEqual(stations[0].prices[2].reliability, RELIABILITY_HIGH)

    def test_non_positive_prices_skipped(self) -> None:
        batches = [(2, [_row(1, 2, 0, "2024-02-15"), _row(2, 2, "n/a", "2024-02-15")])]
        stations = merge_station_batches(batches, now=_NOW)
        self.assertTrue(all(not s.prices for s in stations))

    def test_newer_price_replaces(self) -> None:
        batches = [
            (2, [_row(1, 2, 900, "2024-02-10"), _row(1, 2, 950, "2024-02-15")]),
        ]
        stations = merge_station_batches(batches, now=_NOW)
        self.assertEqual(stations[0].prices[2].price, 950.0)

    def test_older_price_ignored(self) -> None:
        batches = [
            (2, [_row(1, 2, 950, "2024-02-15"), _row(1, 2, 900, "2024-02-10")]),
        ]
        stations = merge_station_batches(batches, now=_NOW)
        self.assertEqual(stations[0].prices[2].price, 950.0)

    def test_integer_price_keys(self) -> None:
        row = _row(1, 2, 950, "2024-02-15")
        row["precios"] = {2: row["precios"]["2"]}
        stations = merge_station_batches([(2, [row])], now=_NOW)
        self.assertIn(2, stations[0].prices)


class TestKeepReliablePerBrand(unittest.TestCase):
    """keep_reliable_per_brand unit tests."""

    def test_drops_unreliable_prices(self) -> None:
        stations = [
            _station("1", "YPF", {
                2: ("2024-02-15", RELIABILITY_HIGH),
                3: ("2024-01-10", RELIABILITY_LIMITED),
            }),
        ]
        result = keep_reliable_per_brand(stations)
        self.assertEqual(list(result[0].prices), [2])

    def test_borrows_from_same_brand(self) -> None:
        stations = [
            _station("1", "YPF", {2: ("2024-02-10", RELIABILITY_HIGH)}),
            _station("2", "YPF", {
                2: ("2024-02-15", RELIABILITY_HIGH),
                3: ("2024-02-15", RELIABILITY_HIGH),
            }),
            _station("3", "SHELL C.A.P.S.A.", {2: ("2024-02-01", RELIABILITY_HIGH)}),
        ]
        result = keep_reliable_per_brand(stations)

        self.assertEqual([s.company_id for s in result], ["1", "3"])
        ypf = result[0]
        self.assertEqual(sorted(ypf.prices), [2, 3])
        self.assertEqual(ypf.prices[2].effective_date, "2024-02-15")

    def test_keeps_own_newer_price(self) -> None:
        stations = [
            _station("1", "YPF", {2: ("2024-02-18", RELIABILITY_HIGH)}),
            _station("2", "YPF", {2: ("2024-02-15", RELIABILITY_HIGH)}),
        ]
        result = keep_reliable_per_brand(stations)
        self.assertEqual(result[0].prices[2].effective_date, "2024-02-18")

    def test_does_not_mutate_input(self) -> None:
        station = _station("1", "YPF", {2: ("2024-01-01", RELIABILITY_LOW)})
        keep_reliable_per_brand([station])
        self.assertIn(2, station.prices)


class TestSortStations(unittest.TestCase):
    """sort_stations unit tests."""

    def test_newest_first_then_nearest(self) -> None:
        center = Settings.ZONES["este"]
        far_new = _station("far", "A", {2: ("2024-02-15", RELIABILITY_HIGH)},
                           lat="-34.90", lon="-58.60")
        near_new = _station("near", "B", {2: ("2024-02-15", RELIABILITY_HIGH)},
                            lat="-34.57", lon="-58.42")
        old = _station("old", "C", {2: ("2024-02-01", RELIABILITY_HIGH)})
        result = sort_stations([old, far_new, near_new], center)

        self.assertEqual([s.company_id for s in result], ["near", "far", "old"])
        self.assertLess(result[0].distance_km, result[1].distance_km)

    def test_bad_coordinates_sort_last(self) -> None:
        center = Settings.ZONES["este"]
        broken = _station("broken", "A", {2: ("2024-02-15", RELIABILITY_HIGH)},
                          lat="", lon="")
        ok = _station("ok", "B", {2: ("2024-02-15", RELIABILITY_HIGH)})
        result = sort_stations([broken, ok], center)
        self.assertEqual([s.company_id for s in result], ["ok", "broken"])
        self.assertIsNone(result[1].distance_km)

    def test_station_without_prices_last(self) -> None:
        center = Settings.ZONES["este"]
        empty = _station("empty", "A", {})
        priced = _station("priced", "B", {2: ("2024-01-01", RELIABILITY_HIGH)})
        result = sort_stations([empty, priced], center)
        self.assertEqual(result[-1].company_id, "empty")


class TestStationService(unittest.IsolatedAsyncioTestCase):
    """StationService against a fake aggregator."""

    def _fake_source(self, rows_by_code: dict[int, list[dict[str, Any]]]) -> MagicMock:
        source = MagicMock()
        source.fetch_stations.side_effect = (
            lambda code, lat, lng: rows_by_code.get(code, [])
        )
        return source

    async def test_fetches_every_fuel_code(self) -> None:
        source = self._fake_source({})
        result = await StationService(source).stations_for_zone("norte")

        self.assertEqual(result, [])
        codes = sorted(c.args[0] for c in source.fetch_stations.call_args_list)
        self.assertEqual(codes, Settings.SURTIDOR_FUEL_CODES)
        lat, lng = Settings.ZONES["norte"]
        for call in source.fetch_stations.call_args_list:
            self.assertEqual(call.args[1:], (lat, lng))

    async def test_returns_best_station_per_brand(self) -> None:
        recent = (datetime.now(timezone.utc) - timedelta(days=1)).strftime(
            "%Y-%m-%d %H:%M:%S"
        )
        source = self._fake_source({
            2: [
                _row(1, 2, 950, recent),
                _row(2, 2, 955, recent),
                _row(3, 2, 990, recent, brand="AXION"),
            ],
            19: [_row(1, 19, 1000, recent)],
        })
        result = await StationService(source).stations_for_zone("este")

        self.assertEqual(sorted(s.brand for s in result), ["AXION", "YPF"])
        ypf = next(s for s in result if s.brand == "YPF")
        self.assertEqual(sorted(ypf.prices), [2, 19])
        payload = ypf.to_dict()
        self.assertEqual(payload["precios"]["19"]["nombre"], "DIESEL500")
        self.assertEqual(payload["precios"]["2"]["confiabilidad"], "high")

    async def test_failing_fuel_code_fails_request(self) -> None:
        source = MagicMock()

        def fetch(code: int, lat: float, lng: float) -> list[dict[str, Any]]:
            if code == 3:
                raise DataSourceError("surtidor: request failed (HTTP 500)")
            return []

        source.fetch_stations.side_effect = fetch
        with self.assertRaises(DataSourceError):
            await StationService(source).stations_for_zone("este")


if __name__ == "__main__":
    unittest.main()
