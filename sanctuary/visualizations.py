from __future__ import annotations

import pandas as pd
import plotly.graph_objects as go

from sanctuary.constants import MOOD_FIELDS
from sanctuary.theme import get_active_theme

MOOD_COLUMNS = [key for key, _ in MOOD_FIELDS]
LINE_COLORS = ["#e11d48", "#7c3aed", "#d97706", "#059669"]


def _active_theme():
    return get_active_theme()[1]


def mood_history_frame(rows):
    frame = pd.DataFrame(rows or [], columns=["date"] + MOOD_COLUMNS)
    if frame.empty:
        return frame
    frame["date"] = pd.to_datetime(frame["date"], errors="coerce")
    frame = frame.dropna(subset=["date"])
    for column in MOOD_COLUMNS:
        frame[column] = pd.to_numeric(frame[column], errors="coerce")
    return frame.sort_values("date").reset_index(drop=True)


def mood_averages(frame):
    if frame is None or frame.empty:
        return {key: 0.0 for key in MOOD_COLUMNS}
    return {key: round(float(frame[key].fillna(0).mean()), 1) for key in MOOD_COLUMNS}


def apply_common_plot_style(fig, title, show_xgrid=True, show_ygrid=True):
    theme = _active_theme()
    fig.update_layout(
        title=title,
        title_font=dict(color=theme["text_main"], size=16, family="Crimson Text"),
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        font=dict(color=theme["text_main"], family="IBM Plex Sans"),
        margin=dict(l=40, r=20, t=40, b=30),
        legend=dict(orientation="h", yanchor="bottom", y=-0.3),
        xaxis=dict(
            showgrid=show_xgrid,
            gridcolor=theme["plot_grid"],
            tickfont=dict(color=theme["text_soft"]),
            zeroline=False,
            showline=True,
            linecolor=theme["border"],
        ),
        yaxis=dict(
            showgrid=show_ygrid,
            gridcolor=theme["plot_grid"],
            zeroline=False,
            tickfont=dict(color=theme["text_soft"]),
            showline=True,
            linecolor=theme["border"],
            range=[0, 10.5],
        ),
    )
    return fig


def mood_history_chart(frame):
    fig = go.Figure()
    for (key, label), color in zip(MOOD_FIELDS, LINE_COLORS):
        fig.add_trace(
            go.Scatter(
                x=frame["date"],
                y=frame[key],
                mode="lines+markers",
                name=label,
                line=dict(color=color, width=2),
                marker=dict(size=6),
            )
        )
    return apply_common_plot_style(fig, "Mood over the last 30 days", show_xgrid=False)
