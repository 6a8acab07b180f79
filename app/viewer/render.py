"""HTML rendering for the inbox list and message detail panels.

Every fragment is built with ``markupsafe.Markup.format`` so interpolated
values are escaped (``& < > " '``) unless they are already ``Markup``.
"""

from __future__ import annotations

import json
from typing import Iterable, Optional
from urllib.parse import urlsplit

from markupsafe import Markup

from app.models import Attachment, InboxResult, Message

from .formatting import format_number, format_timestamp, has_spam_score, preview, short_tag
from .links import extract_links

NO_SUBJECT = "(no subject)"
COPY_LABEL = "Copy text"
COPIED_LABEL = "Copied"
IFRAME_SANDBOX = "allow-same-origin allow-popups"
# 其他协议（javascript: 等）只显示文本，不生成可点击链接
LINK_SCHEMES = {"http", "https", "mailto"}

_SECTION = Markup(
    '<details class="mt-3"><summary class="cursor-pointer text-sm text-gray-700">{}</summary>{}</details>'
)
_PRE = Markup('<pre class="mono text-xs bg-gray-50 p-3 rounded-xl overflow-auto">{}</pre>')


def _join(parts: Iterable[Markup]) -> Markup:
    return Markup("").join(parts)


def _placeholder(text: str) -> Markup:
    return Markup('<div class="text-sm text-gray-500">{}</div>').format(text)


def spam_badge(message: Message) -> Markup:
    if not has_spam_score(message):
        return Markup("")
    return Markup('<span class="badge">spam {}</span>').format(format_number(message.spam_score))


def tag_badge(tag: str) -> Markup:
    if not tag:
        return Markup("")
    return Markup('<span class="badge">{}</span>').format(tag)


def render_row(index: int, message: Message, selected: bool = False) -> Markup:
    css = "w-full text-left mb-2 p-3 rounded-xl border"
    if selected:
        css += " bg-gray-100"
    return Markup(
        '<div data-idx="{idx}" class="{css}">'
        '<div class="flex items-center justify-between gap-2">'
        '<div class="font-medium truncate">{subject}</div>'
        '<div class="text-xs text-gray-500 whitespace-nowrap">{ts}</div>'
        "</div>"
        '<div class="text-xs text-gray-600 truncate">{sender}</div>'
        '<div class="text-xs text-gray-500 mt-1 truncate">{preview}</div>'
        '<div class="mt-1 flex gap-1">{tag}{spam}</div>'
        "</div>"
    ).format(
        idx=index,
        css=css,
        subject=message.subject or NO_SUBJECT,
        ts=format_timestamp(message.timestamp),
        sender=message.from_ or "",
        preview=preview(message),
        tag=tag_badge(short_tag(message.tag)),
        spam=spam_badge(message),
    )


def render_list(inbox: Optional[InboxResult], selected: Optional[Message] = None) -> Markup:
    if inbox is None:
        return _placeholder("No data yet.")
    if not inbox.emails:
        return _placeholder("No emails matched.")
    return _join(
        render_row(index, message, selected=message is selected)
        for index, message in enumerate(inbox.emails)
    )


def render_empty_detail() -> Markup:
    return _placeholder("Select an email on the left.")


def _plain_text_section(message: Message) -> Markup:
    if not message.text:
        return Markup("")
    body = Markup('<pre class="mono text-sm bg-gray-50 p-3 rounded-xl whitespace-pre-wrap">{}</pre>').format(
        message.text
    )
    return _SECTION.format("Plain text", body)


def _link_scheme(link: str) -> str:
    try:
        return urlsplit(link).scheme.lower()
    except ValueError:
        return ""


def _link(link: str) -> Markup:
    if _link_scheme(link) not in LINK_SCHEMES:
        return Markup('<span class="mr-2 break-all">{}</span>').format(link)
    return Markup(
        '<a class="underline text-blue-700 mr-2 break-all" href="{0}" target="_blank" '
        'rel="noreferrer noopener">{0}</a>'
    ).format(link)


def _links_section(links: list[str]) -> Markup:
    if not links:
        return Markup("")
    anchors = _join(_link(link) for link in links)
    return Markup('<div class="mt-3">Links: {}</div>').format(anchors)


def _headers_section(message: Message) -> Markup:
    if message.headers is None:
        return Markup("")
    return _SECTION.format("Headers", _PRE.format(json.dumps(message.headers, indent=2, ensure_ascii=False)))


def _spam_section(message: Message) -> Markup:
    if not has_spam_score(message) and not message.spam_report:
        return Markup("")
    report = message.spam_report or format_number(message.spam_score)
    return _SECTION.format("SpamAssassin", _PRE.format(report))


def _attachment_item(index: int, attachment: Attachment) -> Markup:
    download = Markup("")
    if attachment.data:
        download = Markup(
            ' &mdash; <span class="text-xs text-gray-500" data-dl="{0}">download: <kbd class="mono">d {0}</kbd></span>'
        ).format(index)
    return Markup('<li>{name} <span class="text-xs text-gray-500">{ctype}</span>{download}</li>').format(
        name=attachment.filename or f"attachment-{index + 1}",
        ctype=attachment.content_type or "",
        download=download,
    )


def _attachments_section(message: Message) -> Markup:
    attachments = message.attachments or []
    if not attachments:
        return Markup("")
    items = _join(_attachment_item(index, attachment) for index, attachment in enumerate(attachments))
    return _SECTION.format(
        f"Attachments ({len(attachments)})",
        Markup('<ul class="list-disc pl-6 text-sm">{}</ul>').format(items),
    )


def render_detail(message: Message, copy_label: str = COPY_LABEL, base_url: Optional[str] = None) -> Markup:
    header = Markup(
        '<div class="flex items-start justify-between gap-4">'
        "<div>"
        '<div class="text-xl font-semibold">{subject}</div>'
        '<div class="text-sm text-gray-600 mt-1">From: {sender}</div>'
        '<div class="text-sm text-gray-600">To: {to}</div>'
        '<div class="text-sm text-gray-600">Date: {ts}</div>'
        '<div class="mt-2 flex gap-2">{tag}{spam}</div>'
        "</div>"
        '<div class="flex gap-2">'
        '<span id="openWin" class="btn btn-outline">Open HTML <kbd class="mono">o</kbd></span>'
        '<span id="copyText" class="btn btn-outline">{copy_label} <kbd class="mono">y</kbd></span>'
        "</div>"
        "</div>"
    ).format(
        subject=message.subject or NO_SUBJECT,
        sender=message.from_ or "",
        to=message.to or "",
        ts=format_timestamp(message.timestamp),
        tag=tag_badge(message.tag or ""),
        spam=spam_badge(message),
        copy_label=copy_label,
    )
    # srcdoc 中的原始 HTML 全量转义，iframe 沙箱只允许同源与弹窗
    body = Markup(
        '<div class="mt-4">'
        '<div class="text-sm text-gray-700 mb-2">HTML body</div>'
        '<iframe class="mail" sandbox="{sandbox}" srcdoc="{srcdoc}"></iframe>'
        "{sections}"
        "</div>"
    ).format(
        sandbox=IFRAME_SANDBOX,
        srcdoc=message.html or "",
        sections=_join(
            [
                _plain_text_section(message),
                _links_section(extract_links(message.html, message.text, base_url)),
                _headers_section(message),
                _spam_section(message),
                _attachments_section(message),
            ]
        ),
    )
    return header + body


def render_document(message: Message) -> str:
    """Content for the "Open HTML" window: raw HTML, or the text as <pre>."""
    if message.html:
        return message.html
    return str(Markup("<pre>{}</pre>").format(message.text or ""))


__all__ = [
    "COPIED_LABEL",
    "COPY_LABEL",
    "IFRAME_SANDBOX",
    "render_detail",
    "render_document",
    "render_empty_detail",
    "render_list",
    "render_row",
]
