"""
Static ISO 3166-1 alpha-2 <-> alpha-3 tables.

These are plain mappings handed to the adapters and the key-variant
generator; nothing reads them as ambient state, so tests can pass a
smaller (or empty) table.
"""

from typing import Dict, Mapping, Optional


ISO3_TO_ISO2: Dict[str, str] = {
    "USA": "US", "GBR": "GB", "DEU": "DE", "FRA": "FR", "ITA": "IT", "ESP": "ES",
    "JPN": "JP", "CHN": "CN", "IND": "IN", "BRA": "BR", "RUS": "RU", "CAN": "CA",
    "AUS": "AU", "MEX": "MX", "KOR": "KR", "IDN": "ID", "TUR": "TR", "SAU": "SA",
    "ARG": "AR", "ZAF": "ZA", "NGA": "NG", "EGY": "EG", "PAK": "PK", "BGD": "BD",
    "VNM": "VN", "PHL": "PH", "THA": "TH", "MYS": "MY", "SGP": "SG", "NLD": "NL",
    "BEL": "BE", "CHE": "CH", "SWE": "SE", "NOR": "NO", "DNK": "DK", "FIN": "FI",
    "POL": "PL", "AUT": "AT", "CZE": "CZ", "HUN": "HU", "ROU": "RO", "GRC": "GR",
    "PRT": "PT", "IRL": "IE", "NZL": "NZ", "ISR": "IL", "CHL": "CL", "COL": "CO",
    "PER": "PE", "VEN": "VE", "ECU": "EC", "UKR": "UA", "IRQ": "IQ", "IRN": "IR",
    "DZA": "DZ", "MAR": "MA", "TUN": "TN", "KEN": "KE", "ETH": "ET", "GHA": "GH",
    "LKA": "LK", "NPL": "NP", "AFG": "AF", "MMR": "MM", "KHM": "KH", "LAO": "LA",
    "ARE": "AE",
}

ISO2_TO_ISO3: Dict[str, str] = {iso2: iso3 for iso3, iso2 in ISO3_TO_ISO2.items()}


def to_iso3(code: str, table: Optional[Mapping[str, str]] = None) -> str:
    """
    Best-effort alpha-2 -> alpha-3.

    Codes that are already 3 letters, or have no entry in `table`, pass
    through upper-cased.
    """
    upper = (code or '').strip().upper()
    if len(upper) != 2:
        return upper
    table = ISO2_TO_ISO3 if table is None else table
    return table.get(upper, upper)


def to_iso2(code: str, table: Optional[Mapping[str, str]] = None) -> str:
    """Best-effort alpha-3 -> alpha-2; unknown codes pass through upper-cased."""
    upper = (code or '').strip().upper()
    if len(upper) == 2:
        return upper
    table = ISO3_TO_ISO2 if table is None else table
    return table.get(upper, upper)
