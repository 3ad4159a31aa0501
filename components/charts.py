"""
Chart components using Plotly with custom theme.
"""
import streamlit as st
import plotly.graph_objects as go
import pandas as pd
from typing import Optional


CHART_THEME = {
    "primary": "#3b82f6",
    "background": "#ffffff",
    "grid": "#e5e7eb",
    "text": "#1f2937",
}

# Slice colours for categorical charts
PALETTE = ["#0088FE", "#00C49F", "#FFBB28", "#FF8042", "#8884d8"]


def build_bar_chart(
    df: pd.DataFrame,
    x_column: str,
    y_column: str,
    title: str,
    y_title: Optional[str] = None,
    height: int = 320
) -> go.Figure:
    """
    Build a vertical bar chart figure.

    Args:
        df: DataFrame with data
        x_column: X-axis column name
        y_column: Y-axis column name
        title: Chart title
        y_title: Y-axis label
        height: Chart height in pixels
    """
    fig = go.Figure()

    fig.add_trace(go.Bar(
        x=df[x_column],
        y=df[y_column],
        marker=dict(color=CHART_THEME["primary"]),
        name=y_title or y_column
    ))

    fig.update_layout(
        title=title,
        yaxis_title=y_title or y_column,
        height=height,
        plot_bgcolor=CHART_THEME["background"],
        paper_bgcolor=CHART_THEME["background"],
        font=dict(color=CHART_THEME["text"]),
        showlegend=False
    )

    fig.update_xaxes(type="category", showgrid=False)
    fig.update_yaxes(showgrid=True, gridcolor=CHART_THEME["grid"], rangemode="tozero")

    return fig


def build_pie_chart(
    df: pd.DataFrame,
    labels_column: str,
    values_column: str,
    title: str,
    height: int = 320
) -> go.Figure:
    """
    Build a pie chart figure. Zero-valued slices are dropped; each label keeps
    the palette colour of its row position in df.

    Args:
        df: DataFrame with data
        labels_column: Column with labels
        values_column: Column with values
        title: Chart title
        height: Chart height in pixels
    """
    colour_by_label = {
        label: PALETTE[i % len(PALETTE)] for i, label in enumerate(df[labels_column])
    }
    data = df[df[values_column] > 0]

    fig = go.Figure()

    fig.add_trace(go.Pie(
        labels=data[labels_column],
        values=data[values_column],
        textinfo="label+percent",
        sort=False,
        marker=dict(colors=[colour_by_label[label] for label in data[labels_column]])
    ))

    fig.update_layout(
        title=title,
        height=height,
        paper_bgcolor=CHART_THEME["background"],
        font=dict(color=CHART_THEME["text"]),
        showlegend=False
    )

    return fig


def bar_chart(df: pd.DataFrame, x_column: str, y_column: str, title: str, y_title: Optional[str] = None):
    """
    Render a bar chart.

    Usage:
        bar_chart(calls_df, "date", "calls", "Calls Over Time", y_title="Number of Calls")
    """
    st.plotly_chart(build_bar_chart(df, x_column, y_column, title, y_title), use_container_width=True)


def pie_chart(df: pd.DataFrame, labels_column: str, values_column: str, title: str):
    """
    Render a pie chart.

    Usage:
        pie_chart(duration_df, "bucket", "calls", "Call Duration Distribution")
    """
    st.plotly_chart(build_pie_chart(df, labels_column, values_column, title), use_container_width=True)
