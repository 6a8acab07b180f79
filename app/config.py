from __future__ import annotations

import logging
import os
from pathlib import Path

# testmail.app 凭据，仅在服务端使用，绝不返回给调用方
TESTMAIL_APIKEY = os.getenv("TESTMAIL_APIKEY", "")
TESTMAIL_NAMESPACE = os.getenv("TESTMAIL_NAMESPACE", "")

TESTMAIL_API_URL = os.getenv("TESTMAIL_API_URL", "https://api.testmail.app/api/json")
UPSTREAM_TIMEOUT = float(os.getenv("UPSTREAM_TIMEOUT", "30"))

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8787"))

STATIC_DIR = Path(os.getenv("STATIC_DIR", "static"))
PAGE_FILE = "index.html"

# 上游允许透传的查询参数
UPSTREAM_PARAMS = (
    "pretty",
    "headers",
    "spam_report",
    "tag",
    "tag_prefix",
    "timestamp_from",
    "timestamp_to",
    "limit",
    "offset",
    "livequery",
)

DEFAULT_LIMIT = 50
DEFAULT_OFFSET = 0
AUTO_REFRESH_SECONDS = 5.0
COPIED_LABEL_SECONDS = 1.0
PREVIEW_LENGTH = 100
# 小于该值的时间戳视为秒
TIMESTAMP_MS_THRESHOLD = 10**12

DEFAULT_PROXY_URL = os.getenv("VIEWER_PROXY_URL", "http://localhost:8787")

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger("testmail_viewer")


class ConfigurationError(RuntimeError):
    """Raised when a required secret is missing at startup."""


def require_secrets(api_key: str | None, namespace: str | None) -> None:
    missing = [
        name
        for name, value in (("TESTMAIL_APIKEY", api_key), ("TESTMAIL_NAMESPACE", namespace))
        if not value or not value.strip()
    ]
    if missing:
        raise ConfigurationError(f"Missing {' or '.join(missing)} in environment")
