"""
Render dispatch for tool results.

``render_output(tool_name, text)`` turns the raw text a tool returned into a
view object. Each tool kind has its own parser; a parse failure produces a
``RenderError`` for that one result and never raises, so one bad item cannot
break the rest of the page.

Views render to an HTML fragment (``to_html``) for the web UI and to plain
text (``to_text``) for the terminal front-end.
"""

import json
import logging
import re
from dataclasses import dataclass
from enum import Enum
from html import escape
from typing import Any, List, Optional, Union

from pydantic import ValidationError

from content_tools.schemas import ChartData, RetrievedDocument

logger = logging.getLogger(__name__)

VIDEO_ID_PATTERN = re.compile(r"(?:youtube\.com/embed/|youtu\.be/|^)([a-zA-Z0-9_-]{11})")
VIDEO_ID_LENGTH = 11
CODE_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*|\s*```$")

CHART_COLORS = [
    "#b91d47",
    "#00aba9",
    "#2b5797",
    "#e8c3b9",
    "#1e7145",
    "#ff5733",
    "#900c3f",
    "#581845",
    "#ffd700",
    "#4caf50",
    "#ff9800",
    "#2196f3",
    "#673ab7",
    "#ffeb3b",
]


class ToolKind(str, Enum):
    CHART = "chart"
    DOCUMENT = "document"
    VIDEO = "video"
    AUDIO = "audio"
    IMAGE = "image"
    UNKNOWN = "unknown"

    @classmethod
    def from_tool_name(cls, tool_name: Optional[str]) -> "ToolKind":
        """
        Map a tool name ("chart_tool") or display title ("Chart Tool") to its
        kind; anything else is UNKNOWN.
        """
        if not tool_name:
            return cls.UNKNOWN
        normalized = tool_name.strip().lower().replace(" ", "_")
        if normalized.endswith("_tool"):
            normalized = normalized[: -len("_tool")]
        try:
            return cls(normalized)
        except ValueError:
            return cls.UNKNOWN


# ============== Views ==============

@dataclass
class TextView:
    text: str

    def to_html(self) -> str:
        return f'<span class="result-text">{escape(self.text)}</span>'

    def to_text(self) -> str:
        return self.text


@dataclass
class RenderError:
    message: str

    def to_html(self) -> str:
        return f'<span class="result-error">{escape(self.message)}</span>'

    def to_text(self) -> str:
        return f"[error] {self.message}"


@dataclass
class ChartView:
    chart: ChartData

    width: int = 600
    height: int = 300

    def to_html(self) -> str:
        points = self.chart.data
        # Baseline at zero; all-negative or empty data still gets a scale of 1
        max_value = max([p.value for p in points] + [0]) or 1
        padding = 30
        plot_height = self.height - 2 * padding
        slot = (self.width - 2 * padding) / max(len(points), 1)
        bar_width = slot * 0.7

        bars = []
        for i, point in enumerate(points):
            bar_height = max(point.value, 0) / max_value * plot_height
            x = padding + i * slot + (slot - bar_width) / 2
            y = self.height - padding - bar_height
            color = CHART_COLORS[i % len(CHART_COLORS)]
            bars.append(
                f'<rect x="{x:.1f}" y="{y:.1f}" width="{bar_width:.1f}" height="{bar_height:.1f}" '
                f'fill="{color}" stroke="black" stroke-width="1">'
                f"<title>{escape(point.label)}: {point.value:g}</title></rect>"
                f'<text x="{x + bar_width / 2:.1f}" y="{self.height - padding / 3:.1f}" '
                f'text-anchor="middle" font-size="11">{escape(point.label)}</text>'
            )

        return (
            f'<figure class="result-chart">'
            f"<figcaption>{escape(self.chart.title)}</figcaption>"
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{self.width}" height="{self.height}" '
            f'viewBox="0 0 {self.width} {self.height}" data-chart-type="{escape(self.chart.type)}">'
            f"{''.join(bars)}</svg></figure>"
        )

    def to_text(self) -> str:
        lines = [f"{self.chart.title} ({self.chart.type})"]
        max_value = max([abs(p.value) for p in self.chart.data] + [0]) or 1
        for point in self.chart.data:
            bar = "#" * int(round(abs(point.value) / max_value * 40))
            lines.append(f"  {point.label:<20} {bar} {point.value:g}")
        return "\n".join(lines)


@dataclass
class DocumentsView:
    documents: List[RetrievedDocument]

    def to_html(self) -> str:
        cards = [
            '<div class="result-document">'
            f'<h3><a href="{escape(doc.metadata.source)}" target="_blank" rel="noopener noreferrer">'
            f"{escape(doc.metadata.title)}</a></h3>"
            f"<p>{escape(doc.page_content)}</p></div>"
            for doc in self.documents
        ]
        return f'<div class="result-documents">{"".join(cards)}</div>'

    def to_text(self) -> str:
        blocks = [
            f"{doc.metadata.title}\n  {doc.metadata.source}\n  {doc.page_content}"
            for doc in self.documents
        ]
        return "\n\n".join(blocks)


@dataclass
class VideoView:
    video_id: str

    @property
    def watch_url(self) -> str:
        return f"https://www.youtube.com/watch?v={self.video_id}"

    @property
    def thumbnail_url(self) -> str:
        return f"https://i.ytimg.com/vi/{self.video_id}/hqdefault.jpg"

    def to_html(self) -> str:
        return (
            '<div class="result-video">'
            f'<a href="{self.watch_url}" target="_blank" rel="noopener noreferrer">'
            f'<img src="{self.thumbnail_url}" alt="YouTube Video" loading="lazy" '
            'referrerpolicy="no-referrer"></a>'
            f'<a href="{self.watch_url}" target="_blank" rel="noopener noreferrer">Watch on YouTube</a>'
            "</div>"
        )

    def to_text(self) -> str:
        return f"Watch on YouTube: {self.watch_url}"


@dataclass
class AudioView:
    url: str

    def to_html(self) -> str:
        return (
            '<audio class="result-audio" controls style="width: 100%">'
            f'<source src="{escape(self.url)}" type="audio/mpeg">'
            "Your browser does not support the audio element.</audio>"
        )

    def to_text(self) -> str:
        return f"Audio: {self.url}"


@dataclass
class ImageView:
    url: str

    def to_html(self) -> str:
        return f'<img class="result-image" src="{escape(self.url)}" alt="Image">'

    def to_text(self) -> str:
        return f"Image: {self.url}"


View = Union[TextView, RenderError, ChartView, DocumentsView, VideoView, AudioView, ImageView]


# ============== Parsers ==============

def _strip_code_fence(text: str) -> str:
    return CODE_FENCE_PATTERN.sub("", text.strip())


def parse_chart(text: str) -> ChartData:
    """
    Parse chart tool output.

    The tool returns the model's output message serialized as JSON, so the
    chart object itself is the JSON string in ``content[0].text``. A bare
    chart object is accepted as well.
    """
    parsed: Any = json.loads(text)
    content = parsed.get("content") if isinstance(parsed, dict) else None
    if isinstance(content, list) and content and isinstance(content[0], dict) and "text" in content[0]:
        inner = content[0]["text"]
        if not isinstance(inner, str):
            raise ValueError(f"content[0].text must be a string, got {type(inner).__name__}")
        parsed = json.loads(_strip_code_fence(inner))
    return ChartData.model_validate(parsed)


def parse_documents(text: str) -> List[RetrievedDocument]:
    parsed = json.loads(text)
    if not isinstance(parsed, list):
        raise ValueError("expected a JSON array of documents")
    return [RetrievedDocument.model_validate(doc) for doc in parsed]


def extract_video_id(text: str) -> Optional[str]:
    """
    Extract an 11-character YouTube video id from a bare id or a
    youtu.be / embed URL. Returns None if no valid id can be found.
    """
    match = VIDEO_ID_PATTERN.search(text)
    video_id = match.group(1) if match else text.strip()
    if not video_id or len(video_id) != VIDEO_ID_LENGTH:
        return None
    return video_id


# ============== Dispatch ==============

def _render_chart(text: str) -> View:
    try:
        return ChartView(parse_chart(text))
    except (ValueError, TypeError, KeyError, AttributeError, ValidationError) as e:
        # json.JSONDecodeError is a ValueError
        return RenderError(f"Error parsing chart data: {e}")


def _render_documents(text: str) -> View:
    try:
        return DocumentsView(parse_documents(text))
    except (ValueError, TypeError, AttributeError, ValidationError) as e:
        return RenderError(f"Error parsing document data: {e}")


def _render_video(text: str) -> View:
    video_id = extract_video_id(text)
    if video_id is None:
        return RenderError(f"Invalid YouTube video ID: {text}")
    return VideoView(video_id)


_RENDERERS = {
    ToolKind.CHART: _render_chart,
    ToolKind.DOCUMENT: _render_documents,
    ToolKind.VIDEO: _render_video,
    ToolKind.AUDIO: AudioView,
    ToolKind.IMAGE: ImageView,
    ToolKind.UNKNOWN: TextView,
}


def render_output(tool_name: Optional[str], text: str) -> View:
    """Pick the renderer for ``tool_name`` and build the view for ``text``."""
    kind = ToolKind.from_tool_name(tool_name)
    view = _RENDERERS[kind](text)
    if isinstance(view, RenderError):
        logger.warning(f"Could not render {kind.value} result: {view.message}")
    return view
