"""Unit tests for the transcript export."""

from src.tools.transcript import (
    IMAGE_NOTE,
    TRANSCRIPT_TITLE,
    build_transcript_markdown,
    markdown_to_html,
)

MESSAGES = [
    {"sender": "user", "text": "Here is my math problem:", "image": "data:image/png;base64,AAAA", "ts": "2025-01-01 10:00:00"},
    {"sender": "ai", "text": "First, distribute the **2**.", "image": None, "ts": "2025-01-01 10:00:05"},
]


def test_markdown_has_one_section_per_message():
    md_text = build_transcript_markdown(MESSAGES)

    assert "### [2025-01-01 10:00:00] Student" in md_text
    assert "### [2025-01-01 10:00:05] Tutor" in md_text
    assert md_text.count(IMAGE_NOTE) == 1


def test_markdown_never_embeds_image_data():
    assert "base64" not in build_transcript_markdown(MESSAGES)


def test_empty_transcript():
    assert build_transcript_markdown([]) == ""


def test_html_keeps_formatting():
    html, css = markdown_to_html(build_transcript_markdown(MESSAGES))

    assert html.startswith("<html>")
    assert f"<h1>{TRANSCRIPT_TITLE}</h1>" in html
    assert "<strong>2</strong>" in html
    assert html.count("<h3>") == 2
    assert "@page" in css


def test_html_title_can_be_overridden():
    html, _ = markdown_to_html("", title="Algebra homework")

    assert "<title>Algebra homework</title>" in html
    assert "<h1>Algebra homework</h1>" in html
