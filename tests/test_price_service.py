# tests/test_price_service.py

"""Tests for PriceService and source selection."""

import unittest
from decimal import Decimal
from unittest.mock import patch

from fakes import FakePriceSource, make_record

from src.config.settings import Settings
from src.errors import (
    ConfigurationError,
    DataSourceError,
    NotFoundError,
    ValidationError,
)
from src.services.price_service import PriceService, load_price_source


class TestLoadPriceSource(unittest.TestCase):
    """load_price_source picks a registered strategy."""

    @patch("src.sources.base_source.curl_requests.Session")
    def test_known_ids(self, _mock_session) -> None:
        from src.sources.csv_source import CsvSource
        from src.sources.datastore_source import DatastoreSource

        self.assertIsInstance(load_price_source("datastore"), DatastoreSource)
        self.assertIsInstance(load_price_source("csv"), CsvSource)

    def test_unknown_id(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            load_price_source("carrier-pigeon")
        self.assertIn("datastore", ctx.exception.message)

    def test_unknown_configured_id_is_server_error(self) -> None:
        with patch.object(Settings, "PRICE_SOURCE", "bogus"):
            with self.assertRaises(ConfigurationError) as ctx:
                load_price_source()
        self.assertEqual(ctx.exception.status_code, 500)
        self.assertIn("bogus", ctx.exception.message)


class TestPriceService(unittest.TestCase):
    """PriceService.prices_for_locality unit tests."""

    def _records(self) -> list:
        return [
            make_record(900, "2024-01-01"),
            make_record(950, "2024-02-01", lat=-34.87, lon=-57.88),
            make_record(1100, "2024-02-01", code=3, brand="AXION"),
            make_record(1, "2024-02-01", brand="BLANCA"),
            make_record(800, "2024-02-01", locality="ENSENADA"),
        ]

    def test_aggregates_locality(self) -> None:
        source = FakePriceSource(self._records())
        result = PriceService(source).prices_for_locality(" berisso ")

        self.assertEqual(list(result), ["BERISSO"])
        self.assertEqual(source.calls, [{"locality": "BERISSO", "brand": None}])
        loc = result["BERISSO"]
        self.assertEqual(set(loc.brands), {"YPF", "AXION"})
        self.assertEqual(loc.brands["YPF"]["SUPER"].price, Decimal("950"))
        self.assertEqual(set(loc.scores), {"YPF", "AXION"})

    def test_payload_shape(self) -> None:
        result = PriceService(FakePriceSource(self._records())) \
            .prices_for_locality("BERISSO")
        payload = result["BERISSO"].to_dict()
        self.assertEqual(
            payload["coordenadas"], {"latitud": -34.87, "longitud": -57.88}
        )
        self.assertIn("QUANTIUM", payload["empresas"]["AXION"])
        self.assertIn("YPF", payload["indicadores"])

    def test_empty_name_rejected(self) -> None:
        source = FakePriceSource(self._records())
        with self.assertRaises(ValidationError):
            PriceService(source).prices_for_locality("   ")
        self.assertEqual(source.calls, [])

    def test_unknown_locality_not_found(self) -> None:
        with self.assertRaises(NotFoundError):
            PriceService(FakePriceSource(self._records())) \
                .prices_for_locality("USHUAIA")

    def test_only_excluded_brands_not_found(self) -> None:
        source = FakePriceSource([make_record(1, "2024-02-01", brand="BLANCA")])
        with self.assertRaises(NotFoundError):
            PriceService(source).prices_for_locality("BERISSO")

    def test_source_loaded_lazily(self) -> None:
        with patch(
            "src.services.price_service.load_price_source"
        ) as mock_load:
            service = PriceService(source_id="csv")
            mock_load.assert_not_called()
            service.close()
            mock_load.assert_not_called()

            mock_load.return_value = FakePriceSource(self._records())
            service.prices_for_locality("BERISSO")
        mock_load.assert_called_once_with("csv")

    def test_close_releases_source(self) -> None:
        source = FakePriceSource(self._records())
        PriceService(source).close()
        self.assertTrue(source.closed)

    def test_upstream_error_propagates(self) -> None:
        source = FakePriceSource(error=DataSourceError("datastore: boom"))
        with self.assertRaises(DataSourceError):
            PriceService(source).prices_for_locality("BERISSO")


if __name__ == "__main__":
    unittest.main()
