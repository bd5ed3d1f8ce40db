# tests/test_price_record.py

"""Tests for PriceRecord parsing from dataset rows."""

import unittest
from datetime import datetime, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo

from src.models.price_record import (
    Coordinate,
    PriceRecord,
    parse_coordinate,
    parse_effective_date,
)

_AR = ZoneInfo("America/Argentina/Buenos_Aires")


def _row(**overrides: object) -> dict[str, object]:
    """A dataset row with sensible defaults."""
    row: dict[str, object] = {
        "localidad": "BERISSO",
        "empresabandera": "YPF",
        "idproducto": "2",
        "precio": "950.5",
        "fecha_vigencia": "2024-02-01 10:30:00",
        "latitud": "-34.87",
        "longitud": "-57.88",
        "provincia": "BUENOS AIRES",
        "direccion": "Av. Montevideo 1000",
        "empresa": "ACME S.A.",
    }
    row.update(overrides)
    return row


class TestParseEffectiveDate(unittest.TestCase):
    """Date parsing helpers."""

    def test_date_only(self) -> None:
        """A bare date is local midnight in Argentina."""
        parsed = parse_effective_date("2024-02-01")
        self.assertEqual(parsed, datetime(2024, 2, 1, tzinfo=_AR))
        self.assertEqual(parsed.isoformat(), "2024-02-01T00:00:00-03:00")

    def test_space_separated_datetime(self) -> None:
        """The dataset's 'YYYY-MM-DD HH:MM:SS' form parses."""
        self.assertEqual(
            parse_effective_date("2024-02-01 10:30:00"),
            datetime(2024, 2, 1, 10, 30, tzinfo=_AR),
        )

    def test_utc_suffix(self) -> None:
        """A trailing Z stays UTC."""
        self.assertEqual(
            parse_effective_date("2024-02-01T13:00:00Z"),
            datetime(2024, 2, 1, 13, tzinfo=timezone.utc),
        )

    def test_offset_is_kept(self) -> None:
        """An explicit offset is honoured."""
        parsed = parse_effective_date("2024-02-01T10:30:00-03:00")
        self.assertEqual(parsed.utcoffset().total_seconds(), -3 * 3600)

    def test_empty_raises(self) -> None:
        """Empty dates are rejected."""
        with self.assertRaises(ValueError):
            parse_effective_date("")

    def test_garbage_raises(self) -> None:
        """Unparseable dates are rejected."""
        with self.assertRaises(ValueError):
            parse_effective_date("yesterday")


class TestParseCoordinate(unittest.TestCase):
    """Coordinate coercion."""

    def test_numeric_string(self) -> None:
        self.assertEqual(parse_coordinate("-34.5"), -34.5)

    def test_blank_and_invalid_are_none(self) -> None:
        for value in (None, "", "abc", "nan", "inf"):
            with self.subTest(value=value):
                self.assertIsNone(parse_coordinate(value))


class TestPriceRecordFromRow(unittest.TestCase):
    """PriceRecord.from_row unit tests."""

    def test_fields_parsed(self) -> None:
        """All dataset columns map onto the record."""
        record = PriceRecord.from_row(_row())
        self.assertEqual(record.locality, "BERISSO")
        self.assertEqual(record.brand, "YPF")
        self.assertEqual(record.fuel_type_code, 2)
        self.assertEqual(record.price, Decimal("950.5"))
        self.assertEqual(record.latitude, -34.87)
        self.assertEqual(record.longitude, -57.88)
        self.assertEqual(record.province, "BUENOS AIRES")
        self.assertEqual(record.coordinate, Coordinate(-34.87, -57.88))

    def test_numeric_json_values(self) -> None:
        """JSON API rows carry numbers instead of strings."""
        record = PriceRecord.from_row(
            _row(idproducto=19, precio=1020, latitud=-34.8, longitud=-57.9)
        )
        self.assertEqual(record.fuel_type_code, 19)
        self.assertEqual(record.price, Decimal("1020"))

    def test_missing_coordinates_are_none(self) -> None:
        """Blank coordinates give no coordinate."""
        record = PriceRecord.from_row(_row(latitud="", longitud=None))
        self.assertIsNone(record.latitude)
        self.assertIsNone(record.coordinate)

    def test_invalid_price_raises(self) -> None:
        with self.assertRaises(ValueError):
            PriceRecord.from_row(_row(precio="n/a"))

    def test_invalid_code_raises(self) -> None:
        with self.assertRaises(ValueError):
            PriceRecord.from_row(_row(idproducto="x"))

    def test_missing_locality_raises(self) -> None:
        with self.assertRaises(ValueError):
            PriceRecord.from_row(_row(localidad="  "))

    def test_record_is_immutable(self) -> None:
        """Records are frozen dataclasses."""
        record = PriceRecord.from_row(_row())
        with self.assertRaises(AttributeError):
            record.price = Decimal("1")  # type: ignore[misc]


if __name__ == "__main__":
    unittest.main()
