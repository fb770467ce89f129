import asyncio
import logging

import httpx

from portfolio_intel.exceptions.custom import RateLimitError, SourceError

logger = logging.getLogger(__name__)


class RateLimitedClient:
    """GET wrapper that attaches the API key and paces every call.

    After each call, successful or not, the client sleeps ``delay`` seconds.
    A 429 adds one ``cooldown`` sleep before the failure is raised; services that
    see a rate-limit status in the body call ``cool_down`` themselves. Nothing is
    retried here.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        service: str,
        api_key: str,
        *,
        key_param: str = "key",
        delay: float = 0.5,
        cooldown: float = 10.0,
        error_cls: type[SourceError] = SourceError,
        headers: dict[str, str] | None = None,
    ):
        self._client = client
        self._service = service
        self._api_key = api_key
        self._key_param = key_param
        self._delay = delay
        self._cooldown = cooldown
        self._error_cls = error_cls
        self._headers = headers or {}

    @property
    def service(self) -> str:
        return self._service

    @property
    def api_key(self) -> str:
        return self._api_key

    async def cool_down(self) -> None:
        """Wait out a rate-limit signal, whether it came as a 429 or in the body."""
        logger.warning("%s rate limited, cooling down %.0fs", self._service, self._cooldown)
        await asyncio.sleep(self._cooldown)

    async def get(self, url: str, params: dict | None = None) -> dict:
        query = {**(params or {}), self._key_param: self._api_key}
        try:
            return await self._request(url, query)
        finally:
            await asyncio.sleep(self._delay)

    async def _request(self, url: str, params: dict) -> dict:
        try:
            resp = await self._client.get(url, params=params, headers=self._headers)
        except httpx.HTTPError as exc:
            raise self._error_cls(f"{self._service} request failed: {exc!r}") from exc

        if resp.status_code == 429:
            await self.cool_down()
            raise RateLimitError(self._service)
        if resp.status_code >= 400:
            raise self._error_cls(
                f"{self._service} returned {resp.status_code}: {resp.text[:200]}",
                status_code=resp.status_code,
            )
        if not resp.content:
            raise self._error_cls(
                f"{self._service} returned an empty body", status_code=resp.status_code
            )

        try:
            data = resp.json()
        except ValueError as exc:
            raise self._error_cls(
                f"{self._service} returned invalid JSON", status_code=resp.status_code
            ) from exc
        if not isinstance(data, dict):
            raise self._error_cls(
                f"{self._service} returned an unexpected body", status_code=resp.status_code
            )
        return data
