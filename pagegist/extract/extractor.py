from __future__ import annotations

import copy
import html
import re
from dataclasses import dataclass
from typing import List, Union

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString


# Closed list of page furniture that never belongs in a summary.
NOISE_SELECTORS = (
    "script",
    "style",
    "noscript",
    "iframe",
    "svg",
    "nav",
    "footer",
    "header",
    "aside",
    ".ad",
    ".ads",
    '[role="alert"]',
    '[role="banner"]',
    '[role="navigation"]',
)

# Elements that render on their own line, so their text never fuses with
# the text of a neighbour.
BLOCK_TAGS = frozenset(
    {
        "address", "article", "blockquote", "caption", "dd", "details", "dialog",
        "div", "dl", "dt", "fieldset", "figcaption", "figure", "form", "h1",
        "h2", "h3", "h4", "h5", "h6", "hr", "li", "main", "ol", "p", "pre",
        "section", "summary", "table", "tbody", "td", "tfoot", "th", "thead",
        "tr", "ul",
    }
)

_WS_RE = re.compile(r"\s+")

Document = Union[str, bytes, BeautifulSoup, Tag]


@dataclass(frozen=True)
class ExtractedContent:
    url: str
    title: str
    text: str


def collapse_whitespace(text: str) -> str:
    return _WS_RE.sub(" ", text).strip()


def text_to_document(text: str) -> str:
    """Wrap plain text as HTML that extracts back to the same text."""
    return f"<body><p>{html.escape(text, quote=False)}</p></body>"


def page_title(tree: Tag) -> str:
    # inline <svg> carries its own <title> elements that are not the page title
    for el in tree.find_all("title"):
        if el.find_parent("svg") is None:
            return collapse_whitespace(el.get_text())
    return ""


def _clone(document: Document) -> Tag:
    if isinstance(document, Tag):
        # copy.copy on a bs4 tree copies the whole subtree
        return copy.copy(document)
    return BeautifulSoup(document or "", "html.parser")


def _is_layout_hidden(el: Tag) -> bool:
    if el.name == "template" or el.has_attr("hidden"):
        return True
    style = el.get("style")
    if not style:
        return False
    style = "".join(str(style).split()).lower()
    return "display:none" in style or "visibility:hidden" in style


def _strip_noise(root: Tag) -> None:
    # extract() rather than decompose(): nested matches may already be detached
    for el in root.select(", ".join(NOISE_SELECTORS)):
        el.extract()
    for el in root.find_all(True):
        if _is_layout_hidden(el):
            el.extract()


def _collect_text(node: Tag, parts: List[str]) -> None:
    for child in node.children:
        if isinstance(child, NavigableString):
            if not isinstance(child, PreformattedString):
                parts.append(str(child))
            continue
        if not isinstance(child, Tag):
            continue
        block = child.name in BLOCK_TAGS
        if block or child.name == "br":
            parts.append(" ")
        _collect_text(child, parts)
        if block:
            parts.append(" ")


def visible_text(root: Tag) -> str:
    """Approximate what a reader sees: text nodes in document order."""
    parts: List[str] = []
    _collect_text(root, parts)
    return "".join(parts)


def extract(document: Document, url: str = "") -> ExtractedContent:
    """
    Reduce a page to clean, readable text.

    - Works on a copy; the caller's tree is left untouched.
    - Drops scripts, styles, embedded documents, navigation, headers,
      footers, asides, ad hooks and alert/banner/navigation roles.
    - Drops elements hidden by the ``hidden`` attribute or inline style.
    - Collapses whitespace runs to single spaces and trims the result.

    Never raises for malformed markup; an empty page yields empty text.
    """
    tree = _clone(document)
    title = page_title(tree)

    root = tree.find("body")
    if root is None:
        # fragment without <body>: document metadata is still not visible
        for el in tree.find_all(["head", "title"]):
            el.extract()
        root = tree
    _strip_noise(root)
    return ExtractedContent(url=url, title=title, text=collapse_whitespace(visible_text(root)))
