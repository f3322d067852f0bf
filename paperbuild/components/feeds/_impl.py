"""
Feed text sanitization.

Descriptions come from author-controlled frontmatter and are embedded in
XML, so tags are stripped, entities escaped and Markdown flattened. Only
plain string scanning is used (no backtracking regex).
"""

from __future__ import annotations

MAX_DESCRIPTION_CHARS = 500

_HTML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#39;",
}


def escape_html(text: str) -> str:
    return "".join(_HTML_ESCAPES.get(char, char) for char in text)


def _opens_tag(char: str) -> bool:
    # "x < 5" keeps its "<": only a letter, "/" or "!" starts a real tag.
    return char in "/!" or ("a" <= char.lower() <= "z")


def strip_tags(text: str) -> str:
    out: list[str] = []
    i, length = 0, len(text)
    while i < length:
        if text[i] == "<" and i + 1 < length and _opens_tag(text[i + 1]):
            close = text.find(">", i + 1)
            i = length if close == -1 else close + 1
        else:
            out.append(text[i])
            i += 1
    return "".join(out)


def _unwrap_links(text: str) -> str:
    """[text](url) -> text."""
    index = 0
    while (index := text.find("[", index)) != -1:
        close = text.find("]", index)
        if close != -1 and text[close + 1 : close + 2] == "(":
            close_paren = text.find(")", close + 2)
            if close_paren != -1:
                label = text[index + 1 : close]
                text = text[:index] + label + text[close_paren + 1 :]
                index += len(label)
                continue
        index += 1
    return text


def _drop_inline_code(text: str) -> str:
    out: list[str] = []
    in_code = False
    for char in text:
        if char == "`":
            in_code = not in_code
        elif not in_code:
            out.append(char)
    return "".join(out)


def sanitize_description(description: str) -> str:
    """Plain, escaped, single-paragraph text of at most 500 characters."""
    if not description:
        return ""

    text = escape_html(strip_tags(description))
    text = _unwrap_links(text)
    for marker in ("**", "__", "*", "_"):
        text = text.replace(marker, "")
    text = _drop_inline_code(text)
    return text[:MAX_DESCRIPTION_CHARS].strip()
