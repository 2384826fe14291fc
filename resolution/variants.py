"""
Key-Variant Generator.

SDMX dataflows disagree on how a (frequency, area, indicator) tuple is
encoded: alpha-2 vs alpha-3 areas, FREQ.AREA.INDICATOR vs
FREQ.INDICATOR.AREA, and whether the frequency dimension exists at all.
generate_variants() turns one user-supplied key into an ordered list of
plausible encodings, most likely first. The resolver tries them in order and
stops at the first one that returns data, so order matters.
"""

from typing import Iterator, List, Mapping, Optional

from sources.base import WILDCARD_KEY
from sources.country_codes import ISO2_TO_ISO3, ISO3_TO_ISO2

FREQUENCY_CODES = frozenset({'A', 'Q', 'M', 'W', 'D', 'S'})


def _is_frequency(segment: str) -> bool:
    return segment.upper() in FREQUENCY_CODES


def _is_area(segment: str) -> bool:
    return len(segment) in (2, 3) and segment.isalpha()


def _roles(segments: List[str]) -> dict:
    """Map role -> segment index for a 1-3 segment key."""
    if len(segments) == 3:
        return {'freq': 0, 'area': 1, 'indicator': 2}
    if len(segments) == 2:
        if _is_frequency(segments[0]):
            return {'freq': 0, 'area': 1} if _is_area(segments[1]) else {'freq': 0, 'indicator': 1}
        if _is_area(segments[0]):
            return {'area': 0, 'indicator': 1}
        return {'indicator': 0, 'area': 1} if _is_area(segments[1]) else {}
    if len(segments) == 1 and _is_area(segments[0]):
        return {'area': 0}
    return {}


def alternate_area(area: str,
                   iso3_to_iso2: Optional[Mapping[str, str]] = None,
                   iso2_to_iso3: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """
    The other common spelling of an area code.

    3 letters -> alpha-2 (table, else first two letters).
    2 letters -> alpha-3 when the table knows one (the suffix-letter form).
    """
    if not area.isalpha():
        return None
    upper = area.upper()
    if len(upper) == 3:
        table = ISO3_TO_ISO2 if iso3_to_iso2 is None else iso3_to_iso2
        return table.get(upper, upper[:2])
    if len(upper) == 2:
        table = ISO2_TO_ISO3 if iso2_to_iso3 is None else iso2_to_iso3
        return table.get(upper)
    return None


def _swap_area_indicator(segments: List[str], roles: dict) -> Optional[List[str]]:
    if 'area' not in roles or 'indicator' not in roles:
        return None
    swapped = list(segments)
    a, i = roles['area'], roles['indicator']
    swapped[a], swapped[i] = swapped[i], swapped[a]
    return swapped


def _drop_frequency(segments: List[str], roles: dict) -> Optional[List[str]]:
    if 'freq' not in roles or len(segments) < 2:
        return None
    return [s for idx, s in enumerate(segments) if idx != roles['freq']]


def iter_variants(key: str,
                  iso3_to_iso2: Optional[Mapping[str, str]] = None,
                  iso2_to_iso3: Optional[Mapping[str, str]] = None) -> Iterator[str]:
    """Lazy, possibly repeating sequence of candidate keys (see generate_variants)."""
    yield key

    segments = key.split('.')
    if len(segments) > 3 or key == WILDCARD_KEY:
        return
    roles = _roles(segments)

    alt_segments = None
    if 'area' in roles:
        alt = alternate_area(segments[roles['area']], iso3_to_iso2, iso2_to_iso3)
        if alt:
            alt_segments = list(segments)
            alt_segments[roles['area']] = alt
            yield '.'.join(alt_segments)

    for candidate in (segments, alt_segments):
        if candidate is None:
            continue
        swapped = _swap_area_indicator(candidate, roles)
        if swapped:
            yield '.'.join(swapped)
        dropped = _drop_frequency(candidate, roles)
        if dropped:
            yield '.'.join(dropped)


def generate_variants(key: str,
                      iso3_to_iso2: Optional[Mapping[str, str]] = None,
                      iso2_to_iso3: Optional[Mapping[str, str]] = None) -> List[str]:
    """
    Ordered, de-duplicated key encodings for one logical series.

    Order: the literal key; the area in its other ISO form; indicator before
    area; frequency dropped; then the last two applied to the other ISO form.
    Always starts with `key` itself and is never empty.
    """
    seen = set()
    out = []
    for variant in iter_variants(key, iso3_to_iso2, iso2_to_iso3):
        if variant not in seen:
            seen.add(variant)
            out.append(variant)
    return out
