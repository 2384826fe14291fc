from __future__ import annotations

import httpx
import pytest

from resolution.models import DataRequest
from sources.base import SeriesPoint, TransportError
from sources.sdmx import SDMXSource, normalize, parse_compact, parse_observations, parse_sdmx_json
from tests.utils import mock_client, run


BASE = "https://sdmx.test/3.0"


def _request(key: str = "A.US.NGDPD", start: str = "2019", end: str = "2021") -> DataRequest:
    return DataRequest.from_key("IFS", key, start, end)


def _source(handler, api_key: str = "") -> SDMXSource:
    return SDMXSource(base_url=BASE, agency="IMF", version="latest", api_key=api_key,
                      client=mock_client(handler))


COMPACT = {
    "CompactData": {
        "DataSet": {
            "Series": {
                "Obs": [
                    {"@TIME_PERIOD": "2021", "@OBS_VALUE": "3.5"},
                    {"@TIME_PERIOD": "2019", "@OBS_VALUE": "1.25"},
                    {"@TIME_PERIOD": "2020", "@OBS_VALUE": "NaN"},
                ]
            }
        }
    }
}

SDMX_JSON = {
    "data": {
        "dataSets": [
            {"series": {"0:0:0": {"observations": {"0": [10.5], "1": ["11"], "2": [None]}}}}
        ],
        "structures": [
            {"dimensions": {"observation": [
                {"id": "TIME_PERIOD", "values": [{"id": "2019"}, {"id": "2020"}, {"id": "2021"}]}
            ]}}
        ],
    }
}


def test_build_url_uses_agency_flow_version_and_window() -> None:
    source = SDMXSource(base_url=BASE + "/", agency="IMF", version="latest", api_key="")
    url = httpx.URL(source.build_url(_request()))

    assert url.path == "/3.0/data/IMF/IFS/latest/A.US.NGDPD"
    assert url.params["startPeriod"] == "2019"
    assert url.params["endPeriod"] == "2021"


def test_build_url_without_window_has_no_query() -> None:
    source = SDMXSource(base_url=BASE, agency="IMF", version="latest", api_key="")
    assert source.build_url(_request(start="", end="")) == f"{BASE}/data/IMF/IFS/latest/A.US.NGDPD"


def test_availability_url() -> None:
    source = SDMXSource(base_url=BASE, agency="IMF", version="latest", api_key="")
    url = source.build_availability_url(_request(start="", end=""), "REF_AREA")
    assert url == f"{BASE}/availability/data/IMF/IFS/latest/A.US.NGDPD/REF_AREA"


def test_parse_compact_sorts_and_keeps_missing_as_none() -> None:
    assert parse_compact(COMPACT) == [
        SeriesPoint("2019", 1.25),
        SeriesPoint("2020", None),
        SeriesPoint("2021", 3.5),
    ]


def test_parse_compact_rejects_other_shapes() -> None:
    assert parse_compact({"observations": []}) is None
    assert parse_compact([1, 2]) is None


def test_parse_sdmx_json_indexes_time_dimension() -> None:
    assert parse_sdmx_json(SDMX_JSON) == [
        SeriesPoint("2019", 10.5),
        SeriesPoint("2020", 11.0),
        SeriesPoint("2021", None),
    ]


def test_parse_sdmx_json_empty_datasets() -> None:
    assert parse_sdmx_json({"data": {"dataSets": []}}) == []


def test_parse_observations_flat_and_nested() -> None:
    flat = {"observations": [{"date": "2020", "value": 2}, {"date": "2019", "value": "x"}]}
    nested = {"data": {"observations": [{"TIME_PERIOD": "2020-Q1", "OBS_VALUE": "4.0"}]}}

    assert parse_observations(flat) == [SeriesPoint("2019", None), SeriesPoint("2020", 2.0)]
    assert parse_observations(nested) == [SeriesPoint("2020-Q1", 4.0)]


def test_normalize_reports_shape_and_tolerates_unknown_bodies() -> None:
    assert normalize(COMPACT)[0] == "compact"
    assert normalize(SDMX_JSON)[0] == "sdmx_json"
    assert normalize({"unexpected": True}) == (None, [])
    assert normalize("plain string") == (None, [])


def test_fetch_series_parses_body_and_records_shape() -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=COMPACT)

    result = run(_source(handler).fetch_series(_request()))

    assert [p.date for p in result.points] == ["2019", "2020", "2021"]
    assert result.key == "A.US.NGDPD"
    assert result.info == {"shape": "compact"}
    assert result.raw == COMPACT
    assert str(seen[0].url) == result.url


def test_fetch_series_unknown_shape_is_empty_not_error() -> None:
    result = run(_source(lambda r: httpx.Response(200, json={"errors": []})).fetch_series(_request()))
    assert result.is_empty
    assert result.info == {"shape": None}


def test_api_key_headers_only_when_configured() -> None:
    captured = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request.headers)
        return httpx.Response(200, json=COMPACT)

    run(_source(handler, api_key="secret").fetch_series(_request()))
    run(_source(handler, api_key="").fetch_series(_request()))

    assert captured[0]["X-API-Key"] == "secret"
    assert captured[0]["Ocp-Apim-Subscription-Key"] == "secret"
    assert "X-API-Key" not in captured[1]
    assert captured[1]["Accept"] == "application/json"


def test_http_error_status_is_transport_error() -> None:
    source = _source(lambda r: httpx.Response(503, text="Service Unavailable"))

    with pytest.raises(TransportError) as exc:
        run(source.fetch_series(_request()))

    assert exc.value.status_code == 503
    assert str(exc.value) == "HTTP 503: Service Unavailable"
    assert exc.value.url == source.build_url(_request())


def test_non_json_body_is_transport_error() -> None:
    source = _source(lambda r: httpx.Response(200, text="<html>maintenance</html>",
                                              headers={"content-type": "text/html"}))

    with pytest.raises(TransportError, match="not JSON"):
        run(source.fetch_series(_request()))


def test_connect_error_is_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError) as exc:
        run(_source(handler).fetch_series(_request()))

    assert exc.value.status_code is None
    assert "ConnectError" in str(exc.value)


def test_timeout_is_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(TransportError, match="Timeout"):
        run(_source(handler).fetch_series(_request()))


def test_drifted_nested_nodes_normalize_to_empty() -> None:
    drifted = [
        {"CompactData": "oops"},
        {"CompactData": ["drifted"]},
        {"CompactData": {"DataSet": ["x"]}},
        {"data": {"dataSets": [{"series": [{"observations": {"0": [1]}}]}]}},
        {"data": {"dataSets": [{"series": {"0": ["not a dict"]}}]}},
        {"data": {"dataSets": [{"series": {"0": {"observations": ["x"]}}}], "structures": {"a": 1}}},
        {"data": {"dataSets": [{"series": {"0": {"observations": {"0": [1]}}}}],
                  "structure": {"dimensions": {"observation": [{"values": ["2020"]}]}}}},
    ]

    for body in drifted:
        assert normalize(body)[1] == []


def test_wildcard_key_for_empty_input() -> None:
    source = SDMXSource(base_url=BASE, agency="IMF", version="latest", api_key="")
    request = DataRequest.from_key("IFS", "")

    assert source.build_url(request) == f"{BASE}/data/IMF/IFS/latest/ALL"
    assert source.build_availability_url(request) == f"{BASE}/availability/data/IMF/IFS/latest/ALL/REF_AREA"
