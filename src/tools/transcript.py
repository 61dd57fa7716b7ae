# src/tools/transcript.py
"""Export of a tutoring conversation: Markdown, then HTML, then PDF (WeasyPrint)."""

from typing import Dict, List, Tuple

import markdown as md

TRANSCRIPT_TITLE = "Math Tutor Session"

SENDER_LABELS = {"user": "Student", "ai": "Tutor"}

IMAGE_NOTE = "_[problem image attached]_"

TRANSCRIPT_CSS = """
@page { size: A4; margin: 18mm 16mm; }
body { font-family: 'DejaVu Sans', Arial, sans-serif; font-size: 11pt; line-height: 1.45; color: #1d1d1f; }
h1 { font-size: 16pt; color: #3b3b98; border-bottom: 1px solid #d0d0e8; padding-bottom: 4px; }
h3 { font-size: 10pt; font-weight: normal; color: #6b6b80; margin: 18px 0 4px; }
em { color: #6b6b80; }
code { font-family: 'DejaVu Sans Mono', monospace; background: #f1f1f7; padding: 1px 3px; }
ol, ul { padding-left: 18px; }
"""


def build_transcript_markdown(messages: List[Dict]) -> str:
    """One "### [ts] Student|Tutor" section per message. Image data is left out."""
    sections = []
    for m in messages:
        label = SENDER_LABELS.get(m.get("sender"), "Tutor")
        body = m.get("text", "")
        if m.get("image"):
            body = f"{body}\n\n{IMAGE_NOTE}"
        sections.append(f"### [{m.get('ts', '')}] {label}\n\n{body}\n")
    return "\n".join(sections)


def markdown_to_html(md_text: str, title: str = TRANSCRIPT_TITLE) -> Tuple[str, str]:
    body = md.markdown(f"# {title}\n\n{md_text}", extensions=["extra", "sane_lists", "nl2br"])
    html = f"<html><head><meta charset='utf-8'><title>{title}</title></head><body>{body}</body></html>"
    return html, TRANSCRIPT_CSS


def make_pdf_bytes(html: str, css_text: str) -> bytes:
    # WeasyPrint needs Pango at import time; only the download path pays for it
    from weasyprint import HTML, CSS

    return HTML(string=html).write_pdf(stylesheets=[CSS(string=css_text)])
