from .attachments import SavedAttachment, decode_attachment_data, save_attachment
from .controller import NoSelectionError, QueryController, parse_inbox
from .filters import apply_filters, default_params, encode_query
from .formatting import format_timestamp, preview, short_tag
from .links import extract_links
from .render import render_detail, render_document, render_empty_detail, render_list
from .state import RefreshTimer, ViewState
from .surface import HtmlPageSurface, InboxSurface

__all__ = [
    "HtmlPageSurface",
    "InboxSurface",
    "NoSelectionError",
    "QueryController",
    "RefreshTimer",
    "SavedAttachment",
    "ViewState",
    "apply_filters",
    "decode_attachment_data",
    "default_params",
    "encode_query",
    "extract_links",
    "format_timestamp",
    "parse_inbox",
    "preview",
    "render_detail",
    "render_document",
    "render_empty_detail",
    "render_list",
    "save_attachment",
    "short_tag",
]
