import io
from contextlib import redirect_stdout

import httpx
import pytest

import pagegist.cli as cli
from pagegist.cli import main
from pagegist.llm.client import GeminiClient
from pagegist.llm.summarizer import Summarizer


PAGE = "<html><head><title>Test Page</title></head><body><nav>menu</nav><p>Body text here.</p></body></html>"


def run_cli(args):
    buf = io.StringIO()
    with redirect_stdout(buf):
        code = main(args)
    return code, buf.getvalue()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ("PAGEGIST_API_KEY", "GEMINI_API_KEY", "GOOGLE_API_KEY", "PAGEGIST_CONFIG", "PAGEGIST_MODELS"):
        monkeypatch.delenv(var, raising=False)


def fake_summarizer(handler, models=("A",)):
    http = httpx.Client(transport=httpx.MockTransport(handler))
    return Summarizer(GeminiClient(http), models=list(models))


def ok_handler(sent):
    def handler(request):
        sent.append(request)
        return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "## Summary\nIt works."}]}}]})

    return handler


def test_summarize_missing_api_key_message(tmp_path, monkeypatch):
    def boom(*a, **k):
        raise AssertionError("no summarizer should be built without a key")

    monkeypatch.setattr(cli, "get_summarizer", boom)
    html = tmp_path / "page.html"
    html.write_text(PAGE)

    code, out = run_cli(["summarize", "--html", str(html)])
    assert code == 2
    assert "PAGEGIST_API_KEY" in out


def test_summarize_html_file_prints_summary(tmp_path, monkeypatch):
    sent = []
    monkeypatch.setenv("PAGEGIST_API_KEY", "k")
    monkeypatch.setattr(cli, "get_summarizer", lambda cfg, models=None: fake_summarizer(ok_handler(sent)))
    html = tmp_path / "page.html"
    html.write_text(PAGE)

    code, out = run_cli(["summarize", "--html", str(html)])
    assert code == 0
    assert out.strip() == "## Summary\nIt works."
    body = sent[0].content.decode("utf-8")
    assert "Body text here." in body
    assert "menu" not in body


def test_summarize_writes_out_save_and_page(tmp_path, monkeypatch):
    monkeypatch.setenv("PAGEGIST_API_KEY", "k")
    monkeypatch.setattr(cli, "get_summarizer", lambda cfg, models=None: fake_summarizer(ok_handler([])))
    html = tmp_path / "page.html"
    html.write_text(PAGE)
    out_file = tmp_path / "summary.md"
    page_file = tmp_path / "summary.html"
    save_dir = tmp_path / "saved"

    code, out = run_cli([
        "summarize",
        "--html",
        str(html),
        "--out",
        str(out_file),
        "--save",
        "--save-dir",
        str(save_dir),
        "--page-out",
        str(page_file),
    ])
    assert code == 0
    assert out_file.read_text() == "## Summary\nIt works."
    saved = list(save_dir.glob("summary-*.txt"))
    assert len(saved) == 1
    saved_text = saved[0].read_text()
    assert saved_text.startswith("PAGEGIST SUMMARY\n")
    assert "ORIGINAL CONTENT:\n===================\nBody text here." in saved_text
    page = page_file.read_text()
    assert "<h1>Summary: Test Page</h1>" in page
    assert "<h2>Summary</h2>" in page
    assert "summary written" in out


def test_summarize_reports_api_error(tmp_path, monkeypatch):
    def handler(request):
        return httpx.Response(400, json={"error": {"message": "API key not valid. Please pass a valid API key."}})

    monkeypatch.setenv("PAGEGIST_API_KEY", "bad")
    monkeypatch.setattr(cli, "get_summarizer", lambda cfg, models=None: fake_summarizer(handler))
    html = tmp_path / "page.html"
    html.write_text(PAGE)

    code, out = run_cli(["summarize", "--html", str(html)])
    assert code == 2
    assert "[pagegist] summarize: API key not valid" in out


def test_summarize_empty_page(tmp_path, monkeypatch):
    monkeypatch.setenv("PAGEGIST_API_KEY", "k")
    html = tmp_path / "page.html"
    html.write_text("<html><body><script>only()</script></body></html>")

    code, out = run_cli(["summarize", "--html", str(html)])
    assert code == 2
    assert "could not extract content" in out


def test_summarize_without_source_is_noop(monkeypatch):
    monkeypatch.setenv("PAGEGIST_API_KEY", "k")
    code, out = run_cli(["summarize"])
    assert code == 0
    assert "provide --url or --html" in out


def test_model_flag_is_tried_first(monkeypatch):
    monkeypatch.setenv("PAGEGIST_MODELS", "gemini-1.5-flash,gemini-pro")
    from pagegist.config import load_config

    s = cli.get_summarizer(load_config(), ["gemini-2.0-flash", "gemini-pro"])
    assert s.models == ["gemini-2.0-flash", "gemini-pro", "gemini-1.5-flash"]


def test_summarizer_is_closed_after_summarize_and_discover(tmp_path, monkeypatch):
    closed = []

    class TrackingSummarizer(Summarizer):
        def close(self):
            closed.append(True)
            super().close()

    def build(cfg, models=None):
        http = httpx.Client(transport=httpx.MockTransport(ok_handler([])))
        return TrackingSummarizer(GeminiClient(http), models=["A"])

    monkeypatch.setenv("PAGEGIST_API_KEY", "k")
    monkeypatch.setattr(cli, "get_summarizer", build)
    html = tmp_path / "page.html"
    html.write_text(PAGE)

    code, _ = run_cli(["summarize", "--html", str(html)])
    assert code == 0
    assert closed == [True]

    run_cli(["models", "--discover"])
    assert closed == [True, True]
