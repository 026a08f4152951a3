"""
Plotly renderers for the results page.

Each renderer takes one series and the name of the surface it will occupy,
and returns a freshly built figure. Nothing is drawn incrementally: mounting
a chart on a ChartBoard replaces whatever the surface showed before.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

import plotly.graph_objects as go

from .model import ChartModel, CommitPoint, ContributorBar, LanguageSlice

PALETTE = (
    "#0366d6", "#28a745", "#ffc107", "#dc3545", "#6f42c1",
    "#fd7e14", "#20c997", "#6c757d", "#007bff", "#e83e8c",
)
TIMELINE_COLOR = "#0366d6"
TIMELINE_FILL = "rgba(3, 102, 214, 0.2)"
CONTRIBUTOR_COLOR = "#28a745"

PIE_LABEL_MIN_PERCENT = 5
MARKER_SIZE = 8
MARKER_HOVER_SIZE = 12

PLOTLY_CONFIG = {"displaylogo": False, "responsive": True}


@dataclass(frozen=True)
class ChartSurfaces:
    language: str
    commits: str
    contributors: str

    def all(self) -> List[str]:
        return [self.language, self.commits, self.contributors]


@dataclass(frozen=True, eq=False)
class RenderedChart:
    surface: str
    figure: go.Figure
    post_script: Optional[str] = None

    def to_html(self) -> str:
        return self.figure.to_html(
            full_html=False,
            include_plotlyjs=False,
            div_id=self.surface,
            post_script=self.post_script,
            config=PLOTLY_CONFIG,
        )

    def to_json(self) -> str:
        return self.figure.to_json()


# -----------------------------
# Helpers
# -----------------------------
def build_color_table(series: Iterable[LanguageSlice]) -> Dict[str, str]:
    """
    Category -> color, cycling the palette in first-seen order.
    """
    table: Dict[str, str] = {}
    for s in series:
        if s.category not in table:
            table[s.category] = PALETTE[len(table) % len(PALETTE)]
    return table


def _upper(values: Sequence[float]) -> float:
    top = max(values)
    return top if top > 0 else 1


def _require(series: Sequence, what: str) -> None:
    if not series:
        raise ValueError(f"{what} series is empty; hide the surface instead of rendering it")


def _weight_text(s: LanguageSlice) -> str:
    return f"~{s.approx_weight:,} bytes" if s.approx_weight is not None else "size unknown"


def _base_layout(fig: go.Figure, margin: Optional[dict] = None, **kwargs) -> go.Figure:
    fig.update_layout(
        template="plotly_white",
        margin=margin or dict(l=60, r=30, t=20, b=40),
        height=300,
        hovermode="closest",
        **kwargs,
    )
    return fig


# -----------------------------
# Renderers
# -----------------------------
def render_language_pie(series: Sequence[LanguageSlice], surface: str, *, hole: float = 0.0) -> RenderedChart:
    _require(series, "language")
    colors = build_color_table(series)
    fig = go.Figure(
        go.Pie(
            labels=[s.category for s in series],
            values=[s.percentage for s in series],
            text=[s.category if s.percentage > PIE_LABEL_MIN_PERCENT else "" for s in series],
            textinfo="text",
            textposition="inside",
            insidetextfont=dict(color="white", size=12),
            customdata=[[s.percentage, _weight_text(s)] for s in series],
            hovertemplate="<b>%{label}</b><br>%{customdata[0]:.1f}%<br>%{customdata[1]}<extra></extra>",
            marker=dict(colors=[colors[s.category] for s in series]),
            sort=False,
            direction="clockwise",
            hole=hole,
        )
    )
    _base_layout(fig, showlegend=True, legend=dict(orientation="h", y=-0.1))
    return RenderedChart(surface, fig)


def render_language_bar(series: Sequence[LanguageSlice], surface: str) -> RenderedChart:
    _require(series, "language")
    colors = build_color_table(series)
    categories = [s.category for s in series]
    values = [s.percentage for s in series]
    fig = go.Figure(
        go.Bar(
            x=categories,
            y=values,
            marker_color=[colors[c] for c in categories],
            customdata=[_weight_text(s) for s in series],
            hovertemplate="<b>%{x}</b><br>%{y:.1f}%<br>%{customdata}<extra></extra>",
        )
    )
    _base_layout(fig, showlegend=False)
    fig.update_xaxes(categoryorder="array", categoryarray=categories, tickangle=-45)
    fig.update_yaxes(range=[0, _upper(values)], title_text="Percentage (%)")
    return RenderedChart(surface, fig)


def _hover_grow_script(trace_index: int, n: int) -> str:
    return (
        "var gd = document.getElementById('{plot_id}');\n"
        f"var idx = {trace_index}, n = {n};\n"
        "function sizes(active) {\n"
        "  var out = [];\n"
        f"  for (var i = 0; i < n; i++) out.push(i === active ? {MARKER_HOVER_SIZE} : {MARKER_SIZE});\n"
        "  return out;\n"
        "}\n"
        "gd.on('plotly_hover', function (ev) {\n"
        "  var pt = ev.points[0];\n"
        "  if (pt.curveNumber !== idx) return;\n"
        "  Plotly.restyle(gd, {'marker.size': [sizes(pt.pointNumber)]}, [idx]);\n"
        "});\n"
        "gd.on('plotly_unhover', function () {\n"
        "  Plotly.restyle(gd, {'marker.size': [sizes(-1)]}, [idx]);\n"
        "});\n"
    )


def render_commit_timeline(series: Sequence[CommitPoint], surface: str) -> RenderedChart:
    """
    Filled area plus an overlaid line over the commit timeline.

    The series must already be sorted by date; it is drawn as given.
    """
    _require(series, "commit")
    dates = [p.date.isoformat() for p in series]
    commits = [p.commits for p in series]
    changes = [
        [
            f"+{p.additions:,}" if p.additions is not None else "+?",
            f"-{p.deletions:,}" if p.deletions is not None else "-?",
        ]
        for p in series
    ]

    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=dates,
            y=commits,
            mode="lines",
            line=dict(width=0, shape="spline"),
            fill="tozeroy",
            fillcolor=TIMELINE_FILL,
            hoverinfo="skip",
            showlegend=False,
        )
    )
    fig.add_trace(
        go.Scatter(
            x=dates,
            y=commits,
            mode="lines+markers",
            name="Commits",
            line=dict(color=TIMELINE_COLOR, width=2, shape="spline"),
            marker=dict(color=TIMELINE_COLOR, size=MARKER_SIZE),
            customdata=changes,
            hovertemplate="%{x|%b %d, %Y}<br><b>%{y}</b> commits<br>%{customdata[0]} / %{customdata[1]}<extra></extra>",
        )
    )
    _base_layout(fig, showlegend=False)
    fig.update_xaxes(type="date", range=[dates[0], dates[-1]], tickformat="%b %Y")
    fig.update_yaxes(range=[0, _upper(commits)], title_text="Number of Commits")
    return RenderedChart(surface, fig, post_script=_hover_grow_script(1, len(series)))


def render_contributors(series: Sequence[ContributorBar], surface: str) -> RenderedChart:
    _require(series, "contributor")
    names = [c.name for c in series]
    counts = [c.contribution_count for c in series]
    fig = go.Figure(
        go.Bar(
            x=counts,
            y=names,
            orientation="h",
            marker_color=CONTRIBUTOR_COLOR,
            text=[str(c) for c in counts],
            textposition="outside",
            cliponaxis=False,
            hovertemplate="<b>%{y}</b><br>%{x} contributions<extra></extra>",
        )
    )
    _base_layout(fig, showlegend=False, margin=dict(l=120, r=40, t=20, b=40))
    # first contributor at the top
    fig.update_yaxes(categoryorder="array", categoryarray=names, autorange="reversed")
    fig.update_xaxes(range=[0, _upper(counts)])
    return RenderedChart(surface, fig)


# -----------------------------
# Board
# -----------------------------
class ChartBoard:
    """
    The set of surfaces on one results page and what each currently shows.
    """

    def __init__(self, surfaces: Iterable[str]) -> None:
        self._charts: Dict[str, Optional[RenderedChart]] = {s: None for s in surfaces}
        self._hidden = set()

    def _check(self, surface: str) -> None:
        if surface not in self._charts:
            raise KeyError(f"unknown surface '{surface}'")

    def mount(self, chart: RenderedChart) -> None:
        self._check(chart.surface)
        self._charts[chart.surface] = chart
        self._hidden.discard(chart.surface)

    def clear(self, surface: str) -> None:
        self._check(surface)
        self._charts[surface] = None

    def hide(self, surface: str) -> None:
        self.clear(surface)
        self._hidden.add(surface)

    def is_hidden(self, surface: str) -> bool:
        return surface in self._hidden

    def get(self, surface: str) -> Optional[RenderedChart]:
        self._check(surface)
        return self._charts[surface]

    def html(self, surface: str) -> str:
        chart = self.get(surface)
        return chart.to_html() if chart else ""


def render_chart_model(model: ChartModel, board: ChartBoard, surfaces: ChartSurfaces, *, language_view: str = "pie") -> None:
    """
    Draw every present series of a model; hide surfaces whose series is absent or empty.
    """
    if model.language_series:
        if language_view == "bar":
            board.mount(render_language_bar(model.language_series, surfaces.language))
        else:
            board.mount(render_language_pie(model.language_series, surfaces.language))
    else:
        board.hide(surfaces.language)

    if model.commit_series:
        board.mount(render_commit_timeline(model.commit_series, surfaces.commits))
    else:
        board.hide(surfaces.commits)

    if model.contributor_series:
        board.mount(render_contributors(model.contributor_series, surfaces.contributors))
    else:
        board.hide(surfaces.contributors)
