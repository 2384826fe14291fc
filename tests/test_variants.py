from __future__ import annotations

import pytest

from resolution.variants import alternate_area, generate_variants


KEYS = [
    "A.USA.NGDPD",
    "M.DE.PCPI_IX",
    "Q.CHN.NGDP_R_SA_IX",
    "US.LUR",
    "A.US",
    "NGDPD",
    "GBR",
    "",
    "A.U2.X.Y",
    "A.US.SP.DYN.LE00.IN",
]


@pytest.mark.parametrize("key", KEYS)
def test_original_key_first_and_no_duplicates(key: str) -> None:
    variants = generate_variants(key)

    assert variants[0] == key
    assert len(variants) == len(set(variants))


@pytest.mark.parametrize("key", ["A.USA.NGDPD", "M.XYZ.PCPI_IX", "Q.CHN.ENDA_XDC_USD_RATE"])
def test_three_letter_area_is_shortened(key: str) -> None:
    freq, area, indicator = key.split(".")
    variants = generate_variants(key)

    assert variants[1].split(".")[0] == freq
    assert len(variants[1].split(".")[1]) == 2
    assert variants[1].split(".")[2] == indicator


def test_full_ordering_for_canonical_key() -> None:
    assert generate_variants("A.USA.NGDPD") == [
        "A.USA.NGDPD",
        "A.US.NGDPD",
        "A.NGDPD.USA",
        "USA.NGDPD",
        "A.NGDPD.US",
        "US.NGDPD",
    ]


def test_shortening_uses_table_before_truncation() -> None:
    # CHN truncated would be CH (Switzerland)
    assert generate_variants("A.CHN.NGDPD")[1] == "A.CN.NGDPD"
    assert alternate_area("XYZ", iso3_to_iso2={}) == "XY"


def test_two_letter_area_widens_when_table_knows_it() -> None:
    variants = generate_variants("A.US.NGDPD")
    assert variants[1] == "A.USA.NGDPD"

    unknown = generate_variants("A.QQ.NGDPD", iso2_to_iso3={})
    assert unknown == ["A.QQ.NGDPD", "A.NGDPD.QQ", "QQ.NGDPD"]


def test_two_segment_area_indicator_key() -> None:
    variants = generate_variants("US.LUR", iso2_to_iso3={})
    assert variants == ["US.LUR", "LUR.US"]


def test_frequency_area_key_only_drops_frequency() -> None:
    assert generate_variants("A.US", iso2_to_iso3={}) == ["A.US", "US"]


def test_single_indicator_and_overlong_keys_are_left_alone() -> None:
    assert generate_variants("NGDPD") == ["NGDPD"]
    assert generate_variants("") == [""]
    assert generate_variants("A.US.SP.DYN.LE00.IN") == ["A.US.SP.DYN.LE00.IN"]


def test_deterministic() -> None:
    assert generate_variants("M.DE.PCPI_IX") == generate_variants("M.DE.PCPI_IX")


def test_wildcard_key_has_no_variants() -> None:
    assert generate_variants("ALL") == ["ALL"]
