from datetime import datetime

from pagegist.render import (
    escape_text,
    format_saved_summary,
    markdown_to_html,
    render_summary_page,
    summary_filename,
)


WHEN = datetime(2024, 3, 5, 14, 7, 9)


def test_markdown_headings_and_emphasis():
    md = "# Title\n## Section\n### Sub\n**bold** and *italic*"
    html = markdown_to_html(md)
    assert html == (
        "<h1>Title</h1><br><h2>Section</h2><br><h3>Sub</h3><br>"
        "<b>bold</b> and <i>italic</i>"
    )


def test_markdown_paragraphs_and_line_breaks():
    assert markdown_to_html("one\n\ntwo\nthree") == "one<p></p>two<br>three"


def test_markdown_output_escapes_markup():
    html = markdown_to_html("use <script>alert(1)</script> & more")
    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "&amp; more" in html


def test_escape_text():
    assert escape_text("<a & b>") == "&lt;a &amp; b&gt;"


def test_saved_summary_layout():
    text = format_saved_summary("https://example.com", "original words", "the summary", WHEN)
    assert text == (
        "PAGEGIST SUMMARY\n"
        "Generated: 2024-03-05 14:07:09\n"
        "Source: https://example.com\n\n"
        "SUMMARY:\n===================\nthe summary\n\n"
        "ORIGINAL CONTENT:\n===================\noriginal words"
    )


def test_summary_filename_uses_epoch_millis():
    name = summary_filename(WHEN)
    assert name == f"summary-{int(WHEN.timestamp() * 1000)}.txt"


def test_summary_page_contains_all_parts():
    page = render_summary_page(
        "Rockets <101>",
        "https://example.com/?a=1&b=2",
        "raw <b>text</b>",
        "## Key Points\n**fast**",
        WHEN,
    )
    assert page.startswith("<!DOCTYPE html>")
    assert "<title>Summary: Rockets &lt;101&gt;</title>" in page
    assert 'href="https://example.com/?a=1&amp;b=2"' in page
    assert "<h2>Key Points</h2><br><b>fast</b>" in page
    assert "raw &lt;b&gt;text&lt;/b&gt;" in page
    assert "2024-03-05 14:07:09" in page
    assert "Original Page Content" in page
