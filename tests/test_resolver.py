from __future__ import annotations

import httpx

from resolution.models import DataRequest, ResolutionStatus
from resolution.resolver import Resolver, first_non_empty
from resolution.variants import generate_variants
from sources.base import DatasetFamily, FetchResult
from sources.manager import SourceManager
from sources.sdmx import SDMXSource
from tests.utils import ScriptedSource, mock_client, points, run, transport_error


def _resolver(sdmx=None, datamapper=None, worldbank=None) -> Resolver:
    manager = SourceManager()
    for family, source in ((DatasetFamily.SDMX, sdmx), (DatasetFamily.DATAMAPPER, datamapper),
                           (DatasetFamily.WORLDBANK, worldbank)):
        if source is not None:
            manager.register(family, source)
    return Resolver(manager)


def test_first_non_empty_stops_at_winner() -> None:
    touched = []

    async def attempt(n: int):
        touched.append(n)
        return FetchResult(points=points(("2020", 1.0)) if n == 3 else [])

    winner, result, tried = run(first_non_empty([1, 2, 3, 4, 5], attempt))

    assert winner == 3
    assert tried == 3
    assert touched == [1, 2, 3]
    assert result.points[0].value == 1.0


def test_first_non_empty_treats_none_as_failure() -> None:
    async def attempt(n: int):
        return None

    assert run(first_non_empty(["a", "b"], attempt)) == (None, None, 2)


def test_alternate_area_variant_wins_on_second_call() -> None:
    source = ScriptedSource({"A.US.NGDPD": points(("2020", 21.06), ("2021", 23.32))})
    request = DataRequest.from_key("IFS", "A.USA.NGDPD", "2020", "2021")

    outcome = run(_resolver(sdmx=source).resolve(request))

    assert outcome.status is ResolutionStatus.SUCCESS
    assert source.calls == ["A.USA.NGDPD", "A.US.NGDPD"]
    assert outcome.key == "A.US.NGDPD"
    assert outcome.url == "https://upstream.test/IFS/A.US.NGDPD"
    assert [p.value for p in outcome.points] == [21.06, 23.32]
    assert len(outcome.attempts) == 2
    assert outcome.attempts[0].success and outcome.attempts[0].data_points == 0
    assert outcome.attempts[1].data_points == 2
    assert outcome.variants_tried == 2


def test_nth_variant_success_makes_exactly_n_calls() -> None:
    variants = generate_variants("A.USA.NGDPD")
    for n, winner in enumerate(variants, start=1):
        source = ScriptedSource({winner: points(("2020", 1.0))})
        outcome = run(_resolver(sdmx=source).resolve(DataRequest.from_key("IFS", "A.USA.NGDPD")))

        assert outcome.succeeded
        assert source.calls == variants[:n]
        assert len(outcome.attempts) == n


def test_transport_error_on_one_variant_does_not_stop_the_loop() -> None:
    source = ScriptedSource({
        "A.USA.NGDPD": transport_error("A.USA.NGDPD", status=503),
        "A.NGDPD.USA": points(("2019", 5.0)),
    })

    outcome = run(_resolver(sdmx=source).resolve(DataRequest.from_key("IFS", "A.USA.NGDPD")))

    assert outcome.succeeded
    assert outcome.key == "A.NGDPD.USA"
    first = outcome.attempts[0]
    assert first.success is False
    assert first.error.startswith("HTTP 503")
    assert first.data_points is None
    assert [a.success for a in outcome.attempts] == [False, True, True]


def test_exhaustion_reports_every_attempt() -> None:
    source = ScriptedSource({})
    request = DataRequest.from_key("IFS", "A.USA.NGDPD")

    outcome = run(_resolver(sdmx=source).resolve(request))

    assert outcome.status is ResolutionStatus.EXHAUSTED
    assert outcome.points == []
    assert outcome.key == "A.USA.NGDPD"
    assert len(outcome.attempts) == len(generate_variants("A.USA.NGDPD"))
    assert outcome.url == outcome.attempts[-1].url
    assert outcome.raw == {"key": "US.NGDPD"}
    assert not outcome.all_transport_failures


def test_all_transport_failures_flagged() -> None:
    variants = generate_variants("A.USA.NGDPD")
    source = ScriptedSource({v: transport_error(v) for v in variants})

    outcome = run(_resolver(sdmx=source).resolve(DataRequest.from_key("IFS", "A.USA.NGDPD")))

    assert not outcome.succeeded
    assert outcome.all_transport_failures
    assert outcome.raw is None


def test_datamapper_family_makes_single_call() -> None:
    datamapper = ScriptedSource({"A.US.NGDPD": points(("2021", 23.3))}, name="DM")
    sdmx = ScriptedSource({})

    outcome = run(_resolver(sdmx=sdmx, datamapper=datamapper).resolve(
        DataRequest.from_key("WEO", "A.US.NGDPD", "2021", "2021")))

    assert outcome.succeeded
    assert datamapper.calls == ["A.US.NGDPD"]
    assert sdmx.calls == []
    assert outcome.variants_tried == 1


def test_worldbank_family_empty_is_exhausted_after_one_call() -> None:
    worldbank = ScriptedSource({}, name="WB")

    outcome = run(_resolver(worldbank=worldbank).resolve(
        DataRequest.from_key("WORLDBANK", "A.GB.SP.DYN.LE00.IN")))

    assert outcome.status is ResolutionStatus.EXHAUSTED
    assert worldbank.calls == ["A.GB.SP.DYN.LE00.IN"]
    assert len(outcome.attempts) == 1


def test_custom_variant_generator() -> None:
    source = ScriptedSource({})
    resolver = Resolver(SourceManager({DatasetFamily.SDMX: source}),
                        variant_generator=lambda key: [key, key.lower()])

    run(resolver.resolve(DataRequest.from_key("IFS", "A.US.X")))

    assert source.calls == ["A.US.X", "a.us.x"]


def test_drifted_body_on_one_variant_does_not_stop_the_loop() -> None:
    good = {"observations": [{"date": "2020", "value": 21.06}]}
    drifted = {"CompactData": ["drifted"]}

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/A.USA.NGDPD"):
            return httpx.Response(200, json=drifted)
        return httpx.Response(200, json=good)

    sdmx = SDMXSource(base_url="https://sdmx.test", agency="IMF", version="latest", api_key="",
                      client=mock_client(handler))

    outcome = run(_resolver(sdmx=sdmx).resolve(DataRequest.from_key("IFS", "A.USA.NGDPD")))

    assert outcome.succeeded
    assert outcome.key == "A.US.NGDPD"
    assert [a.data_points for a in outcome.attempts] == [0, 1]


def test_wildcard_key_is_sent_once_as_is() -> None:
    source = ScriptedSource({})

    outcome = run(_resolver(sdmx=source).resolve(DataRequest.from_key("IFS", "")))

    assert source.calls == ["ALL"]
    assert outcome.key == "ALL"
