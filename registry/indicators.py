"""
Indicator Registry - dashboard labels to upstream codes.

Many indicators the dashboard offers actually live in WEO (DataMapper), not
IFS; each label maps to both a code and the dataset that publishes it so
the resolver starts in the right place.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional, Tuple

from config import ANNUAL_ONLY_DATASETS
from resolution.models import DataRequest
from sources.base import DatasetFamily
from sources.country_codes import to_iso2


@dataclass(frozen=True)
class IndicatorInfo:
    """Upstream code + dataset for one dashboard label."""

    code: str
    dataset: str
    category: str = ''


DEFAULT_INDICATOR = IndicatorInfo(code='NGDPD', dataset='WEO', category='Economy')

INDICATOR_DEFINITIONS: Dict[str, IndicatorInfo] = {
    # Economy - WEO codes verified against DataMapper
    "GDP (Current Prices, USD)": IndicatorInfo("NGDPD", "WEO", "Economy"),
    "Real GDP Growth (Annual %)": IndicatorInfo("NGDP_RPCH", "WEO", "Economy"),
    "GDP per capita (USD)": IndicatorInfo("NGDPDPC", "WEO", "Economy"),
    "GNI per capita": IndicatorInfo("PPPPC", "WEO", "Economy"),  # PPP per capita
    "Industrial Production (% change)": IndicatorInfo("NGDP_RPCH", "WEO", "Economy"),  # GDP growth as proxy

    # Finance
    "Inflation Rate (CPI)": IndicatorInfo("PCPIPCH", "WEO", "Finance"),
    "Producer Price Index": IndicatorInfo("PCPIPCH", "WEO", "Finance"),  # CPI as proxy
    "Central Bank Policy Rate": IndicatorInfo("PCPIPCH", "WEO", "Finance"),  # no WEO policy rate
    "Government Gross Debt (% of GDP)": IndicatorInfo("GGXWDG_NGDP", "WEO", "Finance"),
    "Stock Market Index": IndicatorInfo("NGDPD", "WEO", "Finance"),  # no equity data in WEO

    # Social
    "Unemployment Rate": IndicatorInfo("LUR", "WEO", "Social"),
    "Youth Unemployment Rate": IndicatorInfo("LUR", "WEO", "Social"),
    "Population, Total": IndicatorInfo("LP", "WEO", "Social"),
    "Population Growth (Annual %)": IndicatorInfo("LP", "WEO", "Social"),
    "Gini Index": IndicatorInfo("SI.POV.GINI", "WORLDBANK", "Social"),

    # Health
    "Life Expectancy at Birth": IndicatorInfo("SP.DYN.LE00.IN", "WORLDBANK", "Medical"),
    "Maternal Mortality Ratio": IndicatorInfo("SH.STA.MMRT", "WORLDBANK", "Medical"),
    "Child Mortality Rate": IndicatorInfo("SH.DYN.MORT", "WORLDBANK", "Medical"),
    "Health Expenditure (% of GDP)": IndicatorInfo("SH.XPD.CHEX.GD.ZS", "WORLDBANK", "Medical"),
    "Hospital Beds (per 1,000)": IndicatorInfo("SH.MED.BEDS.ZS", "WORLDBANK", "Medical"),

    # Environment
    "CO2 Emissions (per capita)": IndicatorInfo("EN.ATM.CO2E.PC", "WORLDBANK", "Nature"),
    "Renewable Energy Consumption": IndicatorInfo("EG.FEC.RNEW.ZS", "WORLDBANK", "Nature"),
    "Access to Electricity": IndicatorInfo("EG.ELC.ACCS.ZS", "WORLDBANK", "Nature"),
    "Forest Area (% of land)": IndicatorInfo("AG.LND.FRST.ZS", "WORLDBANK", "Nature"),
    "Air Pollution (PM2.5)": IndicatorInfo("EN.ATM.PM25.MC.M3", "WORLDBANK", "Nature"),
}

# UI frequency names -> SDMX letters
FREQ_LETTER: Dict[str, str] = {"Monthly": "M", "Quarterly": "Q", "Yearly": "A"}

TIME_RANGE_YEARS: Dict[str, int] = {"1Y": 1, "3Y": 3, "5Y": 5, "10Y": 10}
MAX_START_YEAR = 1980


def lookup_indicator(label: str) -> IndicatorInfo:
    """Known label -> its definition; anything else -> GDP (current USD)."""
    return INDICATOR_DEFINITIONS.get(label, DEFAULT_INDICATOR)


def frequency_letter(frequency: Optional[str], dataset: str = '') -> str:
    """UI frequency -> M/Q/A. Annual-only datasets are always A."""
    if dataset.upper() in ANNUAL_ONLY_DATASETS:
        return 'A'
    if frequency and frequency.upper() in ('A', 'Q', 'M'):
        return frequency.upper()
    return FREQ_LETTER.get(frequency or '', 'A')


def period_window(time_range: str, now_year: Optional[int] = None) -> Tuple[str, str]:
    """'5Y' -> ('2021', '2026') relative to now; 'Max'/unknown start at 1980."""
    year = now_year or datetime.now().year
    span = TIME_RANGE_YEARS.get((time_range or '').upper())
    start = year - span if span is not None else MAX_START_YEAR
    return str(start), str(year)


def build_request(
    country: str,
    label: str,
    time_range: str = '5Y',
    frequency: str = 'Yearly',
    now_year: Optional[int] = None,
    client_ts: Optional[str] = None,
) -> DataRequest:
    """
    Dashboard selection -> DataRequest.

    The key uses the alpha-2 area (FREQ.AREA.INDICATOR, e.g. A.US.NGDPD);
    adapters that need alpha-3 translate it themselves.
    """
    info = lookup_indicator(label)
    freq = frequency_letter(frequency, info.dataset)
    start, end = period_window(time_range, now_year)
    area = to_iso2(country or 'US')

    diagnostics = {'freq': freq, 'indicatorLabel': label, 'timeRange': time_range}
    if client_ts:
        diagnostics['clientTs'] = client_ts

    return DataRequest(
        family=DatasetFamily.from_flow_ref(info.dataset),
        indicator=info.code,
        area=area,
        start_period=start,
        end_period=end,
        frequency=freq,
        flow_ref=info.dataset,
        diagnostics=diagnostics,
    )
