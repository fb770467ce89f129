import base64
import json
import logging

import httpx

logger = logging.getLogger(__name__)

CONTENTS_URL = "https://api.github.com/repos/{repo}/contents/{path}"


class GitHubSyncError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class GitHubSync:
    """Commits a JSON document to a GitHub repository via the contents API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        token: str,
        repo: str,
        branch: str = "main",
        path: str = "saved-portfolios.json",
    ):
        self._client = client
        self._url = CONTENTS_URL.format(repo=repo, path=path)
        self._branch = branch
        self._path = path
        self._headers = {
            "Authorization": f"token {token}",
            "User-Agent": "portfolio-intel",
            "Accept": "application/vnd.github+json",
        }

    async def _current_sha(self) -> str | None:
        resp = await self._client.get(
            self._url, headers=self._headers, params={"ref": self._branch}
        )
        if resp.status_code == 404:
            return None
        if resp.status_code >= 400:
            raise GitHubSyncError(resp.text, status_code=resp.status_code)
        return resp.json().get("sha")

    async def push(self, data: dict) -> None:
        content = base64.b64encode(
            json.dumps(data, indent=2, ensure_ascii=False).encode("utf-8")
        ).decode("ascii")
        payload = {
            "message": f"chore: update {self._path}",
            "content": content,
            "branch": self._branch,
        }
        sha = await self._current_sha()
        if sha:
            payload["sha"] = sha

        resp = await self._client.put(self._url, json=payload, headers=self._headers)
        if resp.status_code >= 400:
            raise GitHubSyncError(resp.text, status_code=resp.status_code)
        logger.info("GitHub sync: %s committed to %s", self._path, self._branch)

    async def sync(self, data: dict) -> bool:
        """Push without raising; a failed mirror never fails the local write."""
        try:
            await self.push(data)
        except (httpx.HTTPError, GitHubSyncError) as exc:
            logger.warning("GitHub sync failed: %s", exc)
            return False
        return True
