"""
Web Skills
----------
HTTP GET based skills. Bodies are truncated for display.
Network failures propagate to the engine, which reports them.
"""

from typing import Dict, Optional

import httpx

from commands.plan import Command

from .base import Skill, verb_set


def truncate(text: str, limit: int) -> str:
    """Cut text to `limit` characters, marking the cut with an ellipsis."""
    return text[:limit] + "…" if len(text) > limit else text


class _HttpGetSkill(Skill):
    """Shared GET plumbing for the web skills."""

    body_limit: int = 200

    def __init__(
        self,
        timeout_seconds: float = 15.0,
        user_agent: str = "MeghAIna/0.3",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout_seconds = timeout_seconds
        self._headers: Dict[str, str] = {"User-Agent": user_agent}
        self._transport = transport

    async def _get(self, url: str) -> httpx.Response:
        async with httpx.AsyncClient(
            timeout=self.timeout_seconds,
            headers=self._headers,
            transport=self._transport,
            follow_redirects=True,
        ) as client:
            return await client.get(url)


class HttpSkill(_HttpGetSkill):
    """Plain GET of a URL."""

    name = "http"
    verbs = verb_set(["http_get"])
    body_limit = 200

    async def handle(self, command: Command) -> Optional[str]:
        url = str(command.get("url", "") or "")
        if not url:
            return "http_get: missing url"

        response = await self._get(url)
        return f"GET {response.status_code}: {truncate(response.text, self.body_limit)}"


class DeepSearchSkill(_HttpGetSkill):
    """GET of a search endpoint with a longer preview."""

    name = "deep_search"
    verbs = verb_set(["search_http"])
    body_limit = 300

    async def handle(self, command: Command) -> Optional[str]:
        url = str(command.get("url", "") or "")
        if not url:
            return "search_http: missing url"

        response = await self._get(url)
        return f"search_http {response.status_code}: {truncate(response.text, self.body_limit)}"
