from .client import UpstreamClient, build_inbox_url, stringify_param
from .dependencies import get_upstream_client

__all__ = ["UpstreamClient", "build_inbox_url", "get_upstream_client", "stringify_param"]
