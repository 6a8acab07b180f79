"""Query controller for the inbox viewer.

Owns a :class:`ViewState` and drives the fetch -> state -> render cycle
against the proxy's ``/api/inbox`` and ``/api/meta`` endpoints.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Mapping, Optional

import httpx
from markupsafe import Markup
from pydantic import ValidationError

from app.config import AUTO_REFRESH_SECONDS, COPIED_LABEL_SECONDS, logger
from app.models import InboxResult, Message

from .attachments import SavedAttachment, save_attachment
from .filters import apply_filters, default_params, encode_query
from .render import COPIED_LABEL, COPY_LABEL, render_detail, render_document, render_empty_detail, render_list
from .state import RefreshTimer, ViewState
from .surface import InboxSurface

ClipboardWriter = Callable[[str], Awaitable[None]]


class NoSelectionError(LookupError):
    pass


def _parse_emails(items: List[Any]) -> List[Message]:
    emails: List[Message] = []
    for position, item in enumerate(items):
        try:
            emails.append(Message.model_validate(item))
        except ValidationError as exc:
            logger.warning("Skipping malformed email at position %d: %d error(s)", position, exc.error_count())
    return emails


def parse_inbox(payload: Any) -> InboxResult:
    """Validate a proxy payload.

    Messages are validated one by one, so a malformed message is dropped
    without taking the rest of the inbox with it. Anything else unusable
    becomes an empty result.
    """
    if not isinstance(payload, dict):
        logger.warning("Inbox payload is not an object: %s", type(payload).__name__)
        return InboxResult()
    metadata = {key: value for key, value in payload.items() if key != "emails"}
    try:
        inbox = InboxResult.model_validate(metadata)
    except ValidationError as exc:
        logger.warning("Malformed inbox metadata: %d error(s)", exc.error_count())
        inbox = InboxResult()
    items = payload.get("emails")
    if items is None:
        return inbox
    if not isinstance(items, list):
        logger.warning("Inbox emails field is not a list: %s", type(items).__name__)
        return inbox
    inbox.emails = _parse_emails(items)
    return inbox


class QueryController:
    def __init__(
        self,
        client: httpx.AsyncClient,
        surface: InboxSurface,
        state: Optional[ViewState] = None,
        clipboard: Optional[ClipboardWriter] = None,
        downloads_dir: Path = Path("downloads"),
        refresh_interval: float = AUTO_REFRESH_SECONDS,
        copied_seconds: float = COPIED_LABEL_SECONDS,
        base_url: Optional[str] = None,
    ) -> None:
        self.client = client
        self.surface = surface
        self.state = state or ViewState()
        self._clipboard = clipboard
        self._downloads_dir = downloads_dir
        self._refresh_interval = refresh_interval
        self._copied_seconds = copied_seconds
        self._base_url = base_url
        self._label_reset: asyncio.TimerHandle | None = None

    async def load_meta(self) -> str:
        try:
            response = await self.client.get("/api/meta")
            namespace = str(response.json().get("namespace") or "")
        except (httpx.HTTPError, ValueError, AttributeError) as exc:
            logger.warning("Failed to load namespace: %s", exc)
            namespace = ""
        self.state.namespace = namespace
        self.surface.show_namespace(namespace)
        return namespace

    def apply_filters(self, raw: Mapping[str, Any]) -> None:
        self.state.params = apply_filters(raw)

    async def submit_filters(self, raw: Mapping[str, Any]) -> InboxResult:
        self.apply_filters(raw)
        return await self.query()

    async def clear_filters(self) -> InboxResult:
        self.state.params = default_params()
        return await self.query()

    async def _fetch(self) -> InboxResult:
        try:
            response = await self.client.get("/api/inbox", params=encode_query(self.state.params))
        except httpx.HTTPError as exc:
            logger.error("Inbox request failed: %s", exc)
            return InboxResult(result="fail", message=str(exc) or "proxy_error")
        try:
            payload = response.json()
        except ValueError:
            logger.warning("Inbox response (HTTP %s) is not JSON", response.status_code)
            return InboxResult()
        if response.is_error:
            logger.warning("Inbox query returned HTTP %s", response.status_code)
        return parse_inbox(payload)

    async def query(self) -> InboxResult:
        inbox = await self._fetch()
        # 请求完成后再一次性更新状态与视图
        self.state.inbox = inbox
        self.state.selected = inbox.emails[0] if inbox.emails else None
        self.state.copy_label = COPY_LABEL
        self._show_panels()
        return inbox

    def select(self, index: int) -> Message:
        emails = self.state.inbox.emails if self.state.inbox else None
        if not emails or not 0 <= index < len(emails):
            raise IndexError(f"No email at position {index}")
        self.state.selected = emails[index]
        self.state.copy_label = COPY_LABEL
        self._show_panels()
        return self.state.selected

    def _render_selected(self) -> Markup:
        if self.state.selected is None:
            return render_empty_detail()
        return render_detail(self.state.selected, self.state.copy_label, self._base_url)

    def _show_panels(self) -> None:
        # 列表与详情在同一次更新中提交
        self.surface.show_panels(render_list(self.state.inbox, self.state.selected), self._render_selected())

    def _show_selected(self) -> None:
        self.surface.show_detail(self._render_selected())

    def _require_selected(self) -> Message:
        if self.state.selected is None:
            raise NoSelectionError("No email selected")
        return self.state.selected

    def toggle_auto_refresh(self, enabled: bool) -> None:
        if enabled:
            if self.state.auto_refresh is not None:
                return
            self.state.auto_refresh = RefreshTimer.start(self.query, self._refresh_interval)
        else:
            if self.state.auto_refresh is None:
                return
            self.state.auto_refresh.cancel()
            self.state.auto_refresh = None
        self.surface.show_auto_refresh(enabled)

    def open_html(self) -> None:
        message = self._require_selected()
        self.surface.open_document(render_document(message))

    async def copy_text(self) -> str:
        message = self._require_selected()
        if self._clipboard is None:
            raise RuntimeError("No clipboard available")
        text = message.text or message.html or ""
        await self._clipboard(text)
        self.state.copy_label = COPIED_LABEL
        self._show_selected()
        if self._label_reset is not None:
            self._label_reset.cancel()
        self._label_reset = asyncio.get_running_loop().call_later(self._copied_seconds, self._reset_copy_label, message)
        return text

    def _reset_copy_label(self, message: Message) -> None:
        self._label_reset = None
        self.state.copy_label = COPY_LABEL
        if self.state.selected is message:
            self._show_selected()

    def download(self, index: int) -> SavedAttachment:
        message = self._require_selected()
        attachments = message.attachments or []
        if not 0 <= index < len(attachments):
            raise IndexError(f"No attachment at position {index}")
        attachment = attachments[index]
        if not attachment.data:
            raise ValueError("Attachment data is not inlined")
        return save_attachment(attachment, self._downloads_dir)

    def close(self) -> None:
        self.toggle_auto_refresh(False)
        if self._label_reset is not None:
            self._label_reset.cancel()
            self._label_reset = None


__all__ = ["ClipboardWriter", "NoSelectionError", "QueryController", "parse_inbox"]
