from __future__ import annotations

from dashboard.constants import CATEGORY_COLORS, PRIMARY_COLOR, TREND_COLOR

TEXT_MAIN = "#2D2A32"
TEXT_SOFT = "#6F6A78"
GRID = "rgba(111, 106, 120, 0.18)"
BORDER = "rgba(111, 106, 120, 0.35)"


def apply_common_plot_style(fig, title, show_xgrid=True, show_ygrid=True):
    fig.update_layout(
        title=title,
        title_font=dict(color=TEXT_MAIN, size=16),
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        font=dict(color=TEXT_MAIN),
        margin=dict(l=40, r=20, t=40, b=30),
        xaxis=dict(
            showgrid=show_xgrid,
            gridcolor=GRID,
            tickfont=dict(color=TEXT_SOFT),
            zeroline=False,
            showline=True,
            linecolor=BORDER,
            mirror=True,
        ),
        yaxis=dict(
            showgrid=show_ygrid,
            gridcolor=GRID,
            zeroline=False,
            tickfont=dict(color=TEXT_SOFT),
            showline=True,
            linecolor=BORDER,
            mirror=True,
        ),
    )
    return fig


def completion_bar_chart(chart_data, title, height=300):
    import plotly.graph_objects as go

    fig = go.Figure(
        data=go.Bar(
            x=[item["name"] for item in chart_data],
            y=[item["value"] for item in chart_data],
            marker=dict(color=PRIMARY_COLOR),
            hovertemplate="%{x}: %{y:.0f}%<extra></extra>",
        )
    )
    apply_common_plot_style(fig, title, show_xgrid=False)
    fig.update_layout(height=height)
    fig.update_yaxes(range=[0, 100], ticksuffix="%")
    return fig


def category_bar_chart(items, title, height=300):
    import plotly.graph_objects as go

    fig = go.Figure(
        data=go.Bar(
            x=[item["name"] for item in items],
            y=[item["value"] for item in items],
            marker=dict(color=[CATEGORY_COLORS.get(item["name"].lower(), PRIMARY_COLOR) for item in items]),
            hovertemplate="%{x}: %{y:.0f}%<extra></extra>",
        )
    )
    apply_common_plot_style(fig, title, show_xgrid=False)
    fig.update_layout(height=height)
    fig.update_yaxes(ticksuffix="%")
    return fig


def ranking_chart(rows, title, limit=10):
    import plotly.graph_objects as go

    top = rows[:limit]
    fig = go.Figure(
        data=go.Bar(
            x=[row["average"] for row in top],
            y=[row["name"] for row in top],
            orientation="h",
            marker=dict(color=[CATEGORY_COLORS.get(row["category"], PRIMARY_COLOR) for row in top]),
            hovertemplate="%{y}: %{x:.0f}%<extra></extra>",
        )
    )
    apply_common_plot_style(fig, title, show_ygrid=False)
    fig.update_layout(height=max(260, 36 * len(top)))
    fig.update_xaxes(range=[0, 100], ticksuffix="%")
    fig.update_yaxes(autorange="reversed", automargin=True)
    return fig


def trend_line_chart(rows, title, height=320):
    import plotly.graph_objects as go

    fig = go.Figure(
        data=go.Scatter(
            x=[row["name"] for row in rows],
            y=[row["value"] for row in rows],
            mode="lines+markers",
            line=dict(color=TREND_COLOR, width=2),
            marker=dict(size=7, color=TREND_COLOR),
            hovertemplate="%{x}: %{y:.0f}%<extra></extra>",
        )
    )
    apply_common_plot_style(fig, title)
    fig.update_layout(height=height)
    fig.update_yaxes(range=[0, 100], ticksuffix="%")
    return fig
