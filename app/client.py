"""Async HTTP client for the leaderboard API."""

from __future__ import annotations

import httpx

from app.models.schemas import LeaderboardResponse


class LeaderboardClientError(Exception):
    """Raised when the API answers with a non-2xx status."""

    def __init__(self, operation: str, status_code: int, body: str):
        self.operation = operation
        self.status_code = status_code
        self.body = body
        super().__init__(f"{operation} failed: {status_code} - {body}")


class LeaderboardClient:
    def __init__(self, base_url: str = "", http: httpx.AsyncClient | None = None):
        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(base_url=base_url)

    async def __aenter__(self) -> LeaderboardClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def submit(self, player_id: str, score: int) -> LeaderboardResponse:
        response = await self.http.post("/api/submit", json={"playerId": player_id, "score": score})
        self._raise_for_status("Submit", response)
        return LeaderboardResponse.model_validate(response.json())

    async def get_board(self, player_id: str) -> LeaderboardResponse:
        response = await self.http.get("/api/leaderboard", params={"playerId": player_id})
        self._raise_for_status("Get", response)
        return LeaderboardResponse.model_validate(response.json())

    async def reset(self) -> None:
        response = await self.http.post("/api/reset")
        self._raise_for_status("Reset", response)

    @staticmethod
    def _raise_for_status(operation: str, response: httpx.Response) -> None:
        if response.is_success:
            return
        raise LeaderboardClientError(operation, response.status_code, response.text)
