from __future__ import annotations

from typing import Any, Mapping, Optional

import httpx

from app.config import TESTMAIL_API_URL, UPSTREAM_PARAMS, UPSTREAM_TIMEOUT, logger


def stringify_param(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_inbox_url(
    params: Mapping[str, Any],
    api_key: str,
    namespace: str,
    base_url: str = TESTMAIL_API_URL,
) -> httpx.URL:
    """Build the upstream inbox query URL.

    ``apikey`` and ``namespace`` always come from server configuration. Only the
    allow-listed names are copied from ``params``, and only when their string
    form is non-empty.
    """
    url = httpx.URL(base_url)
    url = url.copy_set_param("apikey", api_key)
    url = url.copy_set_param("namespace", namespace)
    for key in UPSTREAM_PARAMS:
        value = params.get(key)
        if value is None:
            continue
        text = stringify_param(value)
        if text == "":
            continue
        url = url.copy_set_param(key, text)
    return url


class UpstreamClient:
    def __init__(
        self,
        api_key: str,
        namespace: str,
        base_url: str = TESTMAIL_API_URL,
        timeout: float = UPSTREAM_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._namespace = namespace
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport

    @property
    def namespace(self) -> str:
        return self._namespace

    def redact(self, text: str) -> str:
        if not self._api_key:
            return text
        return text.replace(self._api_key, "***")

    def build_url(self, params: Mapping[str, Any]) -> httpx.URL:
        return build_inbox_url(params, self._api_key, self._namespace, self._base_url)

    async def fetch(self, params: Mapping[str, Any]) -> httpx.Response:
        # 单次请求，不重试；传输异常交由调用方处理
        url = self.build_url(params)
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            response = await client.get(url)
        forwarded = sorted(key for key in UPSTREAM_PARAMS if key in url.params)
        logger.info("Upstream inbox query params=%s status=%s", forwarded, response.status_code)
        return response


__all__ = ["UpstreamClient", "build_inbox_url", "stringify_param"]
