"""
Dashboard cards: the call metric row and the empty-state card.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import streamlit as st

from components.charts import CHART_THEME
from utils.formatters import format_change, format_duration, format_percentage


@dataclass(frozen=True)
class StatCard:
    """One metric tile on the dashboard."""
    label: str
    value: str
    delta: Optional[str] = None
    help_text: Optional[str] = None


def call_stat_cards(stats: Dict[str, Any]) -> List[StatCard]:
    """
    Turn get_call_stats() output into the dashboard's metric tiles.

    Args:
        stats: Dict returned by services.dashboard_service.get_call_stats

    Returns:
        Total calls (with week-over-week delta), calls today, average
        duration and completion rate, in display order
    """
    return [
        StatCard(
            "Total Calls",
            f"{stats['total_calls']:,}",
            delta=format_change(stats['weekly_change_pct']),
            help_text=f"{stats['calls_7d']} calls in the last 7 days",
        ),
        StatCard(
            "Calls Today",
            f"{stats['calls_today']:,}",
            help_text="Calls recorded since midnight UTC",
        ),
        StatCard(
            "Avg. Call Duration",
            format_duration(stats['avg_duration_seconds']),
            help_text="Mean length of calls with a recorded duration",
        ),
        StatCard(
            "Completion Rate",
            format_percentage(stats['completion_rate'], decimals=1),
            help_text="Share of records with a conversation transcript",
        ),
    ]


def call_stats_row(stats: Dict[str, Any]):
    """Render the metric tiles side by side."""
    cards = call_stat_cards(stats)
    for column, card in zip(st.columns(len(cards)), cards):
        with column:
            st.metric(label=card.label, value=card.value, delta=card.delta, help=card.help_text)


def get_started_card(message: str, title: str = "Get Started", icon: str = "🚀"):
    """
    Empty-state card shown before any call has been recorded.

    Usage:
        get_started_card("Upload a phone list in the Call Manager to make your first call.")
    """
    accent = CHART_THEME["primary"]
    st.markdown(
        f"""
        <div style="padding: 1rem; background: #eff6ff; border-radius: 0.5rem;
                    border-left: 4px solid {accent}; margin: 1rem 0;">
            <div style="font-weight: 600; color: #1e40af; margin-bottom: 0.25rem;">
                {icon} {title}
            </div>
            <div style="color: #1e40af; font-size: 0.875rem;">{message}</div>
        </div>
        """,
        unsafe_allow_html=True
    )
