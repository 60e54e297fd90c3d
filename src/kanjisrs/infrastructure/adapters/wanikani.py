import logging
from datetime import datetime, timezone
from typing import Any

import httpx

from kanjisrs.domain.constants import (
    ALREADY_REVIEWED_STATUS,
    REQUEST_TIMEOUT,
    WANIKANI_API_URL,
    WANIKANI_REVISION,
)
from kanjisrs.domain.errors import (
    AlreadyReviewedError,
    MissingApiKeyError,
    ProviderError,
    ProviderHTTPError,
    RateLimitedError,
    UnauthorizedError,
)
from kanjisrs.domain.models import Assignment, ReviewSubmission, SRSStage
from kanjisrs.domain.ports import SrsProvider

logger = logging.getLogger(__name__)


def stage_from_provider(code: int) -> SRSStage:
    """Provider stage codes 0-9 map onto SRSStage one to one."""
    try:
        return SRSStage(int(code))
    except (TypeError, ValueError):
        logger.warning(f"Unknown provider SRS stage {code!r}, treating as Lesson")
        return SRSStage.LESSON


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def assignment_from_payload(payload: dict[str, Any]) -> Assignment:
    data = payload["data"]
    return Assignment(
        id=int(payload["id"]),
        subject_id=int(data["subject_id"]),
        subject_type=data["subject_type"],
        srs_stage=stage_from_provider(data.get("srs_stage", 0)),
        available_at=_parse_timestamp(data.get("available_at")),
        burned_at=_parse_timestamp(data.get("burned_at")),
        passed_at=_parse_timestamp(data.get("passed_at")),
        started_at=_parse_timestamp(data.get("started_at")),
        unlocked_at=_parse_timestamp(data.get("unlocked_at")),
    )


class WaniKaniAdapter(SrsProvider):
    """Adapter for syncing review results with WaniKani (API v2 over HTTP)."""

    def __init__(
        self,
        api_key: str | None,
        url: str = WANIKANI_API_URL,
        timeout: float = REQUEST_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key
        self.url = url.rstrip("/")
        self.timeout = timeout
        self._client = client
        self.logger = logging.getLogger(__name__)

    async def fetch_user(self) -> dict[str, Any]:
        body = await self._request("GET", "/user")
        return body["data"]

    async def fetch_assignments(
        self,
        subject_types: list[str],
        srs_stages: list[int] | None = None,
        updated_after: datetime | None = None,
    ) -> list[Assignment]:
        params: dict[str, str] = {"subject_types": ",".join(subject_types)}
        if srs_stages:
            params["srs_stages"] = ",".join(str(s) for s in srs_stages)
        if updated_after is not None:
            params["updated_after"] = updated_after.isoformat()

        assignments: list[Assignment] = []
        next_url: str | None = "/assignments"
        query: dict[str, str] | None = params

        while next_url:
            body = await self._request("GET", next_url, params=query)
            assignments.extend(assignment_from_payload(p) for p in body.get("data", []))
            next_url = (body.get("pages") or {}).get("next_url")
            # next_url already carries the query string
            query = None

        self.logger.debug(f"Fetched {len(assignments)} assignments for {subject_types}")
        return assignments

    async def submit_review(self, submission: ReviewSubmission) -> None:
        await self._request(
            "POST",
            "/reviews",
            json={
                "review": {
                    "assignment_id": submission.assignment_id,
                    "incorrect_meaning_answers": submission.incorrect_meaning_answers,
                    "incorrect_reading_answers": submission.incorrect_reading_answers,
                }
            },
        )
        self.logger.info(
            f"Submitted review for assignment {submission.assignment_id} "
            f"(meaning wrong={submission.incorrect_meaning_answers}, "
            f"reading wrong={submission.incorrect_reading_answers})"
        )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        if not self.api_key:
            raise MissingApiKeyError()

        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)

        url = endpoint if endpoint.startswith("http") else f"{self.url}{endpoint}"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Wanikani-Revision": WANIKANI_REVISION,
        }

        try:
            resp = await self._client.request(
                method, url, params=params, json=json, headers=headers
            )
        except httpx.HTTPError as e:
            raise ProviderError(f"Request to {url} failed: {e}") from e

        if 200 <= resp.status_code < 300:
            return resp.json() if resp.content else {}
        if resp.status_code == 401:
            raise UnauthorizedError()
        if resp.status_code == ALREADY_REVIEWED_STATUS:
            raise AlreadyReviewedError(resp.text or None)
        if resp.status_code == 429:
            raise RateLimitedError()
        raise ProviderHTTPError(resp.status_code, resp.text or None)
