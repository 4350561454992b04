"""Optional generative advisory provider with heuristic substitution."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import requests

from quanta.analytics.recommendation import RecommendationEngine
from quanta.domain.models import CacheEntry, Recommendation, Verdict
from quanta.errors import MalformedRecommendationResponse


class GeminiAdvisor:
    """Ask a Gemini model for a {rec, score, insight} JSON verdict."""

    BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        session: requests.Session | None = None,
        timeout: float = 20,
    ) -> None:
        if not api_key:
            raise ValueError("api_key is required for the advisory provider")
        self.api_key = api_key
        self.model = model
        self.session = session or requests.Session()
        self.timeout = timeout

    def advise(self, symbol: str, price: float, percent_change: float) -> Recommendation:
        """Return the provider's verdict or raise MalformedRecommendationResponse."""
        prompt = (
            f"Analyze {symbol} at ${price:.2f} ({percent_change:+.2f}%). "
            'Return JSON: {"rec": "BUY/SELL/HOLD", "score": 0-100, "insight": "short text"}'
        )
        response = self.session.post(
            f"{self.BASE_URL}/{self.model}:generateContent",
            params={"key": self.api_key},
            json={
                "contents": [{"parts": [{"text": prompt}]}],
                "generationConfig": {"responseMimeType": "application/json"},
            },
            timeout=self.timeout,
        )
        response.raise_for_status()
        try:
            body = response.json()
        except ValueError as exc:
            raise MalformedRecommendationResponse("advisory response is not JSON") from exc
        return self.parse(body)

    @staticmethod
    def parse(body: Any) -> Recommendation:
        try:
            text = body["candidates"][0]["content"]["parts"][0]["text"]
            verdict_json = json.loads(text)
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise MalformedRecommendationResponse(
                "advisory response has no JSON verdict"
            ) from exc
        if not isinstance(verdict_json, dict):
            raise MalformedRecommendationResponse("advisory verdict is not an object")

        raw_rec = str(verdict_json.get("rec", "")).strip().upper()
        if raw_rec not in {item.value for item in Verdict}:
            raise MalformedRecommendationResponse(f"advisory verdict '{raw_rec}' is not supported")
        raw_score = verdict_json.get("score")
        if isinstance(raw_score, bool) or not isinstance(raw_score, (int, float)):
            raise MalformedRecommendationResponse("advisory score is missing or not numeric")
        score = int(round(raw_score))
        if not 0 <= score <= 100:
            raise MalformedRecommendationResponse(f"advisory score {score} is out of range")
        insight = verdict_json.get("insight")
        if not isinstance(insight, str) or not insight.strip():
            raise MalformedRecommendationResponse("advisory insight is missing")
        return Recommendation(
            verdict=Verdict(raw_rec),
            score=score,
            insight=insight.strip(),
            source="advisor",
        )


class RecommendationService:
    """Use the advisory provider when configured, the heuristic otherwise."""

    def __init__(
        self,
        engine: RecommendationEngine | None = None,
        advisor: GeminiAdvisor | None = None,
    ) -> None:
        self.engine = engine or RecommendationEngine()
        self.advisor = advisor
        self.logger = logging.getLogger("quanta.advisor")

    async def recommend(self, symbol: str, entry: CacheEntry) -> Recommendation:
        heuristic = self.engine.score(symbol, entry.series)
        if self.advisor is None:
            return heuristic
        try:
            advised = await asyncio.to_thread(
                self.advisor.advise,
                entry.key.symbol,
                entry.stats.price,
                entry.stats.percent_change,
            )
        except (MalformedRecommendationResponse, requests.RequestException) as exc:
            self.logger.warning(
                "Advisory provider unavailable for %s, using heuristic: %s",
                entry.key.symbol,
                exc,
            )
            return heuristic
        return Recommendation(
            verdict=advised.verdict,
            score=advised.score,
            insight=advised.insight,
            support=heuristic.support,
            resistance=heuristic.resistance,
            source=advised.source,
        )
