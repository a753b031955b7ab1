from __future__ import annotations

import re
from datetime import datetime
from string import Template


_MARKDOWN_RULES = [
    (re.compile(r"^### (.*)$", re.MULTILINE | re.IGNORECASE), r"<h3>\1</h3>"),
    (re.compile(r"^## (.*)$", re.MULTILINE | re.IGNORECASE), r"<h2>\1</h2>"),
    (re.compile(r"^# (.*)$", re.MULTILINE | re.IGNORECASE), r"<h1>\1</h1>"),
    (re.compile(r"\*\*(.*)\*\*"), r"<b>\1</b>"),
    (re.compile(r"\*(.*)\*"), r"<i>\1</i>"),
]

RULE = "==================="


def escape_text(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def escape_attr(text: str) -> str:
    return escape_text(text).replace('"', "&quot;")


def markdown_to_html(markdown: str) -> str:
    """
    Convert the small Markdown subset models emit into HTML.

    - ``#``, ``##``, ``###`` headings at line start
    - ``**bold**`` and ``*italic*`` within a line
    - blank lines become paragraph breaks, single newlines ``<br>``

    Input is HTML-escaped first so model output cannot inject markup.
    """
    html = escape_text(markdown.replace("\r\n", "\n"))
    for pattern, repl in _MARKDOWN_RULES:
        html = pattern.sub(repl, html)
    return html.replace("\n\n", "<p></p>").replace("\n", "<br>")


def format_timestamp(when: datetime) -> str:
    return when.strftime("%Y-%m-%d %H:%M:%S")


def summary_filename(when: datetime) -> str:
    return f"summary-{int(when.timestamp() * 1000)}.txt"


def format_saved_summary(url: str, original: str, summary: str, when: datetime) -> str:
    return (
        f"PAGEGIST SUMMARY\nGenerated: {format_timestamp(when)}\n"
        f"Source: {url}\n\n"
        f"SUMMARY:\n{RULE}\n{summary}\n\n"
        f"ORIGINAL CONTENT:\n{RULE}\n{original}"
    )


_PAGE = Template(
    """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>Summary: $title</title>
  <style>
    body { font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Helvetica, Arial, sans-serif;
           max-width: 900px; margin: 0 auto; padding: 40px; line-height: 1.6; color: #1f2937; background-color: #f3f4f6; }
    .container { background: white; padding: 40px; border-radius: 12px; box-shadow: 0 4px 6px -1px rgba(0, 0, 0, 0.1); }
    h1 { border-bottom: 2px solid #e5e7eb; padding-bottom: 10px; color: #111827; margin-top: 0; }
    h2 { color: #374151; margin-top: 30px; border-bottom: 1px solid #eee; padding-bottom: 5px; }
    h3 { color: #4b5563; margin-top: 20px; }
    .meta-box { background: #f8fafc; border: 1px solid #e2e8f0; padding: 15px; border-radius: 8px; margin-bottom: 30px; font-size: 0.9em; }
    .meta-row { display: flex; gap: 10px; margin-bottom: 5px; }
    .meta-label { font-weight: 600; color: #64748b; min-width: 80px; }
    .meta-value { color: #334155; word-break: break-all; }
    .full-content-section { margin-top: 60px; border-top: 4px solid #e5e7eb; padding-top: 30px; }
    .full-content-box { background: #f8fafc; border: 1px solid #e2e8f0; padding: 20px; border-radius: 8px;
                        font-family: monospace; white-space: pre-wrap; font-size: 0.85em; max-height: 600px;
                        overflow-y: auto; color: #475569; }
    .footer { margin-top: 50px; padding-top: 20px; border-top: 1px solid #e5e7eb; font-size: 0.8em; color: #9ca3af; text-align: center; }
  </style>
</head>
<body>
  <div class="container">
    <h1>Summary: $title</h1>
    <div class="meta-box">
      <div class="meta-row">
        <div class="meta-label">Source URL:</div>
        <div class="meta-value"><a href="$url_attr" target="_blank">$url</a></div>
      </div>
      <div class="meta-row">
        <div class="meta-label">Date:</div>
        <div class="meta-value">$date</div>
      </div>
    </div>
    <div class="content">
      $summary
    </div>
    <div class="full-content-section">
      <h2>Original Page Content</h2>
      <div class="full-content-box">$original</div>
    </div>
    <div class="footer">Generated by pagegist</div>
  </div>
</body>
</html>
"""
)


def render_summary_page(title: str, url: str, original: str, summary: str, when: datetime) -> str:
    """Build the standalone HTML page shown after a summary completes."""
    return _PAGE.substitute(
        title=escape_text(title),
        url=escape_text(url),
        url_attr=escape_attr(url),
        date=format_timestamp(when),
        summary=markdown_to_html(summary),
        original=escape_text(original or ""),
    )
