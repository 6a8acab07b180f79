from __future__ import annotations

import os
import tempfile
import webbrowser
from pathlib import Path
from typing import Protocol

from markupsafe import Markup

from app.config import AUTO_REFRESH_SECONDS, logger

from .render import render_empty_detail, render_list


class InboxSurface(Protocol):
    def show_namespace(self, namespace: str) -> None: ...

    def show_detail(self, content: Markup) -> None: ...

    def show_panels(self, list_content: Markup, detail_content: Markup) -> None: ...

    def show_auto_refresh(self, enabled: bool) -> None: ...

    def open_document(self, document: str) -> None: ...


PAGE_TEMPLATE = Markup(
    """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  {refresh}
  <title>Testmail Viewer</title>
  <script src="https://cdn.tailwindcss.com"></script>
  <link rel="icon" href="data:,">
  <style>
    .scroll-y {{ overflow-y: auto; }}
    .mono {{ font-family: ui-monospace, SFMono-Regular, Menlo, Monaco, Consolas, monospace; }}
    .card {{ border-radius: 1rem; padding: 1rem; background: #fff; box-shadow: 0 1px 3px rgb(0 0 0 / 10%); }}
    .badge {{ display:inline-block; font-size:.75rem; padding:.125rem .5rem; border-radius:.5rem; background:#e5e7eb; }}
    .btn {{ padding:.5rem .75rem; border-radius:.75rem; }}
    .btn-outline {{ border:1px solid #e5e7eb; }}
    .pill {{ font-size:.75rem; padding:.25rem .5rem; border-radius:9999px; background:#f3f4f6; border:1px solid #e5e7eb; }}
    .split {{ display:grid; grid-template-columns:380px 1fr; height:calc(100vh - 20px); gap:16px; }}
    iframe.mail {{ width:100%; height:60vh; border:1px solid #e5e7eb; border-radius:12px; background:white; }}
  </style>
</head>
<body class="bg-gray-50 text-gray-900">
  <div class="max-w-[1400px] mx-auto p-4">
    <header class="flex items-center justify-between mb-3">
      <h1 class="text-2xl font-semibold">Testmail Viewer</h1>
      <div class="flex items-center gap-2 text-sm">
        <span class="pill">namespace: <strong id="ns">{namespace}</strong></span>
        <span class="pill">auto-refresh: {auto}</span>
      </div>
    </header>
    <div class="split">
      <aside class="scroll-y"><div class="card overflow-auto" id="list">{list}</div></aside>
      <main class="scroll-y"><div class="card" id="details">{details}</div></main>
    </div>
    <footer class="mt-3 text-xs text-gray-500" id="commands">
      Viewer commands: <kbd class="mono">s N</kbd> select row N,
      <kbd class="mono">o</kbd> open HTML, <kbd class="mono">y</kbd> copy text,
      <kbd class="mono">d N</kbd> download attachment N, <kbd class="mono">f key=value</kbd> filter,
      <kbd class="mono">c</kbd> clear, <kbd class="mono">a on|off</kbd> auto-refresh.
    </footer>
  </div>
</body>
</html>
"""
)


class HtmlPageSurface:
    """Renders the viewer panels into a single HTML page on disk."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.namespace = ""
        self.list_html = render_list(None)
        self.detail_html = render_empty_detail()
        self.auto_refresh = False

    def show_namespace(self, namespace: str) -> None:
        self.namespace = namespace
        self.flush()

    def show_detail(self, content: Markup) -> None:
        self.detail_html = content
        self.flush()

    def show_panels(self, list_content: Markup, detail_content: Markup) -> None:
        self.list_html = list_content
        self.detail_html = detail_content
        self.flush()

    def show_auto_refresh(self, enabled: bool) -> None:
        self.auto_refresh = enabled
        self.flush()

    def render(self) -> str:
        refresh = Markup("")
        if self.auto_refresh:
            refresh = Markup('<meta http-equiv="refresh" content="{}" />').format(int(AUTO_REFRESH_SECONDS))
        return str(
            PAGE_TEMPLATE.format(
                refresh=refresh,
                namespace=self.namespace,
                auto="on" if self.auto_refresh else "off",
                list=self.list_html,
                details=self.detail_html,
            )
        )

    def flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(prefix=".page-", suffix=".html", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(self.render())
            os.replace(temp_name, self.path)
        finally:
            if os.path.exists(temp_name):
                os.unlink(temp_name)

    def open_document(self, document: str) -> None:
        # 在新的浏览器窗口中打开原始 HTML
        fd, temp_name = tempfile.mkstemp(prefix="testmail-", suffix=".html")
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(document)
        if not webbrowser.open_new_tab(Path(temp_name).as_uri()):
            logger.warning("No browser available; document written to %s", temp_name)


__all__ = ["HtmlPageSurface", "InboxSurface", "PAGE_TEMPLATE"]
