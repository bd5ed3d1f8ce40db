# src/services/fuel_names.py

"""Brand-specific display names for dataset fuel-type codes."""

UNKNOWN_FUEL_NAME = "Unknown fuel type"

# code -> display name shared by every brand, or brand -> display name
_FUEL_NAMES: dict[int, str | dict[str, str]] = {
    2: {
        "YPF": "SUPER",
        "SHELL C.A.P.S.A.": "Shell Super",
        "AXION": "Axion SUPER",
        "PUMA": "PUMA Super",
    },
    3: {
        "YPF": "INFINIA",
        "SHELL C.A.P.S.A.": "Shell V-Power",
        "AXION": "QUANTIUM",
        "PUMA": "MAX Premium",
    },
    6: "GNC",
    19: {
        "YPF": "DIESEL500",
        "SHELL C.A.P.S.A.": "Shell Evolux Diesel",
        "AXION": "AXION Diesel X10",
        "PUMA": "PUMA Diesel",
    },
    21: {
        "YPF": "INFINIA DIESEL",
        "SHELL C.A.P.S.A.": "Shell V-Power Diesel",
        "AXION": "QUANTIUM Diesel X10",
        "PUMA": "ION PUMA Diesel",
    },
}

_FUEL_CATEGORIES: dict[int, str] = {
    2: "SUPER",
    3: "PREMIUM",
    6: "GNC",
    19: "DIESEL",
    21: "DIESEL-PREMIUM",
}


def get_fuel_name(fuel_type_code: int, brand: str) -> str:
    """Resolve the display name for a fuel code sold under *brand*.

    Never raises: unknown codes or brands give ``UNKNOWN_FUEL_NAME``.
    """
    entry = _FUEL_NAMES.get(fuel_type_code)
    if isinstance(entry, str):
        return entry
    if isinstance(entry, dict):
        return entry.get(brand, UNKNOWN_FUEL_NAME)
    return UNKNOWN_FUEL_NAME


def get_fuel_category(fuel_type_code: int) -> str | None:
    """Brand-independent category (``SUPER``, ``GNC``...) of a code."""
    return _FUEL_CATEGORIES.get(fuel_type_code)
