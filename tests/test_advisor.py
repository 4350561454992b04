from __future__ import annotations

import asyncio
import json
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
import requests

from quanta.analytics.advisor import GeminiAdvisor, RecommendationService
from quanta.analytics.stats import derive_stats
from quanta.domain.models import (
    Bar,
    CacheEntry,
    PriceSeries,
    Recommendation,
    RequestKey,
    TimeframeId,
    Verdict,
)
from quanta.errors import MalformedRecommendationResponse


def _entry() -> CacheEntry:
    start = datetime(2025, 1, 1, tzinfo=UTC)
    bars = tuple(
        Bar(time=start + timedelta(days=i), open=c, high=c + 1.0, low=c - 1.0, close=c)
        for i, c in enumerate([100.0, 100.2, 100.1])
    )
    series = PriceSeries(symbol="TSLA", timeframe_id=TimeframeId.WEEK, bars=bars)
    return CacheEntry(
        key=RequestKey.of("TSLA", TimeframeId.WEEK),
        series=series,
        stats=derive_stats(series),
        simulated=False,
    )


def _body(verdict: dict[str, Any] | str) -> dict[str, Any]:
    text = verdict if isinstance(verdict, str) else json.dumps(verdict)
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class FakeResponse:
    def __init__(self, payload: Any, status_code: int = 200) -> None:
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")

    def json(self) -> Any:
        return self.payload


class FakeSession:
    def __init__(self, response: FakeResponse) -> None:
        self.response = response
        self.posts: list[dict[str, Any]] = []

    def post(
        self,
        url: str,
        params: dict[str, str],
        json: dict[str, Any],
        timeout: float,
    ) -> FakeResponse:
        self.posts.append({"url": url, "params": params, "json": json, "timeout": timeout})
        return self.response


def test_advisor_parses_provider_verdict() -> None:
    body = _body({"rec": "buy", "score": 81, "insight": "Strong bid."})
    session = FakeSession(FakeResponse(body))
    advisor = GeminiAdvisor(
        api_key="g-key",
        model="gemini-test",
        session=session,  # type: ignore[arg-type]
    )

    recommendation = advisor.advise("TSLA", 250.5, 1.25)

    assert recommendation == Recommendation(
        verdict=Verdict.BUY,
        score=81,
        insight="Strong bid.",
        source="advisor",
    )
    post = session.posts[0]
    assert post["url"].endswith("/gemini-test:generateContent")
    assert post["params"] == {"key": "g-key"}
    prompt = post["json"]["contents"][0]["parts"][0]["text"]
    assert "TSLA" in prompt and "250.50" in prompt and "+1.25%" in prompt
    assert post["json"]["generationConfig"] == {"responseMimeType": "application/json"}


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"candidates": []},
        _body("not json"),
        _body(["BUY"]),
        _body({"rec": "MAYBE", "score": 50, "insight": "?"}),
        _body({"rec": "BUY", "score": 140, "insight": "too sure"}),
        _body({"rec": "SELL", "score": "high", "insight": "text score"}),
        _body({"rec": "HOLD", "score": 50}),
    ],
)
def test_advisor_rejects_malformed_responses(body: Any) -> None:
    with pytest.raises(MalformedRecommendationResponse):
        GeminiAdvisor.parse(body)


def test_advisor_requires_key() -> None:
    with pytest.raises(ValueError, match="api_key"):
        GeminiAdvisor(api_key="")


def test_service_without_advisor_uses_heuristic_directly() -> None:
    recommendation = asyncio.run(RecommendationService().recommend("TSLA", _entry()))

    assert recommendation.source == "heuristic"
    assert recommendation.verdict == Verdict.HOLD


def test_service_falls_back_when_provider_is_malformed() -> None:
    session = FakeSession(FakeResponse(_body("garbage")))
    advisor = GeminiAdvisor(api_key="g-key", session=session)  # type: ignore[arg-type]

    recommendation = asyncio.run(RecommendationService(advisor=advisor).recommend("TSLA", _entry()))

    assert recommendation.source == "heuristic"
    assert len(session.posts) == 1


def test_service_falls_back_on_http_errors() -> None:
    session = FakeSession(FakeResponse({}, status_code=429))
    advisor = GeminiAdvisor(api_key="g-key", session=session)  # type: ignore[arg-type]

    recommendation = asyncio.run(RecommendationService(advisor=advisor).recommend("TSLA", _entry()))

    assert recommendation.source == "heuristic"


def test_service_keeps_heuristic_levels_on_advisor_verdict() -> None:
    session = FakeSession(FakeResponse(_body({"rec": "SELL", "score": 22, "insight": "Fading."})))
    advisor = GeminiAdvisor(api_key="g-key", session=session)  # type: ignore[arg-type]

    recommendation = asyncio.run(RecommendationService(advisor=advisor).recommend("TSLA", _entry()))

    assert recommendation.source == "advisor"
    assert recommendation.verdict == Verdict.SELL
    assert recommendation.score == 22
    assert recommendation.support == 99.0
    assert recommendation.resistance == 101.2
