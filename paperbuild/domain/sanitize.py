"""
URL sanitization for Markdown and HTML that ends up in feeds and pages.

Blocks javascript:, data:, vbscript: and any other non-allowlisted scheme
by replacing the URL with "about:blank".
"""

import re
from urllib.parse import urlsplit

SAFE_PROTOCOLS = frozenset({"http", "https", "mailto", "tel", "ftp", "ftps"})
BLANK_URL = "about:blank"

_MARKDOWN_LINK = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_URL_ATTRIBUTE = re.compile(r"""(href|src|srcset|data|action|poster)=["']([^"']+)["']""")
# Control characters and whitespace browsers drop inside a scheme ("java\tscript:").
_SCHEME_NOISE = re.compile(r"[\x00-\x20]")


def is_safe_url(url: str) -> bool:
    url = url.strip()
    if url.startswith(("/", "#", "?")):
        return True
    try:
        scheme = urlsplit(_SCHEME_NOISE.sub("", url)).scheme.lower()
    except ValueError:
        return False
    # No scheme means a relative URL ("posts/x").
    return scheme == "" or scheme in SAFE_PROTOCOLS


def sanitize_url(url: str) -> str:
    trimmed = url.strip()
    return trimmed if is_safe_url(trimmed) else BLANK_URL


def sanitize_markdown_urls(markdown: str) -> str:
    """Rewrite unsafe targets of [text](url) links."""
    return _MARKDOWN_LINK.sub(lambda m: f"[{m.group(1)}]({sanitize_url(m.group(2))})", markdown)


def sanitize_html_attribute_urls(html: str) -> str:
    """Rewrite unsafe href/src/... attribute values. Output always uses double quotes."""
    return _URL_ATTRIBUTE.sub(lambda m: f'{m.group(1)}="{sanitize_url(m.group(2))}"', html)


def extract_domain(url: str) -> str:
    """Host name for link previews; "invalid" for unsafe or unparseable URLs."""
    if not is_safe_url(url):
        return "invalid"
    if url.startswith("/"):
        return "same-origin"
    if url.startswith("mailto:"):
        return "mailto"
    if url.startswith("tel:"):
        return "tel"
    try:
        host = urlsplit(url).hostname
    except ValueError:
        return "invalid"
    return host or "same-origin"
