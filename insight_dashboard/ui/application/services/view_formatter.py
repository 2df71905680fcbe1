"""View Formatter for the dashboard UI.

Purpose:
    Turn classified use-case rows into ``TableView`` models that widgets can
    render without any further decisions. Style keys carry the band of each
    cell (``segment-high``, ``cohort-cell-low``, ``prediction-medium``...) and
    ``muted`` marks not-applicable cells.

External Dependencies:
    Standard library only; performs no HTTP calls.

Fallback Semantics:
    None. Inputs are already validated and classified.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from ....application.dto import (
    BestTimeView,
    CohortMatrix,
    DistributionRow,
    PredictionView,
    RFMRow,
    ScoredRow,
)
from ....domain.models import Band, Event, QueryRequest, QueryResult, User
from ...shared.dto import TableView

MUTED = "muted"


def _style(prefix: str, band: Optional[Band]) -> Optional[str]:
    return f"{prefix}-{band.value.lower()}" if band is not None else MUTED


def _text(value: Any) -> str:
    return "-" if value is None or value == "" else str(value)


class ViewFormatter:
    """Format use-case results into region views.

    The formatter is stateless; every method returns a new ``TableView``.
    """

    # --- Users & events ---
    def users_table(self, users: Sequence[User]) -> TableView:
        rows = [
            [
                u.user_id,
                _text(u.properties.get("name")),
                _text(u.properties.get("email")),
                _text(u.properties.get("country")),
                str(u.event_count),
            ]
            for u in users
        ]
        return TableView(
            title="Users",
            columns=["User ID", "Name", "Email", "Country", "Events"],
            rows=rows,
            empty_message="No users found",
        )

    def events_table(self, events: Sequence[Event], title: str = "Recent Events", with_user: bool = True) -> TableView:
        columns = ["Event ID", "Event", "User ID", "Time", "Properties"] if with_user else ["Event ID", "Event", "Time", "Properties"]
        rows: List[List[str]] = []
        for e in events:
            row = [e.event_id, e.event_name]
            if with_user:
                row.append(e.user_id)
            row.extend([self.format_timestamp(e.timestamp), self.format_properties(e.properties)])
            rows.append(row)
        return TableView(title=title, columns=columns, rows=rows, empty_message="No events found")

    def format_timestamp(self, millis: Optional[int]) -> str:
        if millis is None:
            return "-"
        try:
            return datetime.fromtimestamp(int(millis) / 1000).strftime("%Y-%m-%d %H:%M:%S")
        except (OverflowError, OSError, ValueError):
            return str(millis)

    def format_properties(self, properties: Dict[str, Any]) -> str:
        return ", ".join(f"{k}: {v}" for k, v in (properties or {}).items())

    # --- Queries ---
    def distribution_table(self, rows: Sequence[DistributionRow]) -> TableView:
        return TableView(
            title="Event Distribution",
            columns=["Event", "Count"],
            rows=[[_text(r.label), _text(r.value)] for r in rows],
            empty_message="No events found",
        )

    def query_table(self, query: QueryRequest, result: QueryResult) -> TableView:
        """Rows with selected fields first, then every aggregation alias.

        Aggregations are request-wide scalars, so each row repeats the same
        value for every alias. An alias that shares a name with a row field
        is headed ``"<alias> (agg)"``.
        """
        columns: List[str] = list(query.select)
        for row in result.rows:
            columns.extend(k for k in row if k not in columns)
        aliases = [a.alias for a in query.aggregate] or list(result.aggregations)
        agg_values = [_text(result.aggregations.get(a)) for a in aliases]
        agg_headers = [f"{a} (agg)" if a in columns else a for a in aliases]
        rows = [[_text(row.get(c)) for c in columns] + agg_values for row in result.rows]
        if not result.rows and aliases:
            rows = [["-" for _ in columns] + agg_values]
        return TableView(
            title="Query Results",
            columns=columns + agg_headers,
            rows=rows,
            caption=f"{len(result.rows)} row(s)",
            empty_message="No rows matched",
        )

    # --- Segmentation ---
    def rfm_table(self, rows: Sequence[RFMRow]) -> TableView:
        return TableView(
            title="RFM Segments",
            columns=["User ID", "Recency", "Frequency", "Monetary", "Segment"],
            rows=[[r.user_id, str(r.recency), str(r.frequency), str(r.monetary), r.label] for r in rows],
            styles=[[None, None, None, None, _style("segment", r.band)] for r in rows],
            empty_message="No users scored",
        )

    def cohort_table(self, matrix: CohortMatrix) -> TableView:
        rows: List[List[str]] = []
        styles: List[List[Optional[str]]] = []
        for r in matrix.rows:
            rows.append([f"Cohort {r.cohort_index} ({r.size} users)"] + [c.text for c in r.cells])
            styles.append([None] + [_style("cohort-cell", c.band) if c.applicable else MUTED for c in r.cells])
        return TableView(
            title="Cohort Retention",
            columns=["Cohort"] + [f"Period {i}" for i in range(matrix.num_periods)],
            rows=rows,
            styles=styles,
            empty_message="No cohorts",
        )

    # --- ML ---
    def scores_table(self, rows: Sequence[ScoredRow], title: str, empty_message: str) -> TableView:
        return TableView(
            title=title,
            columns=["Item", "Score"],
            rows=[[r.item_id, r.score_text] for r in rows],
            styles=[[None, "score"] for _ in rows],
            empty_message=empty_message,
        )

    def prediction_card(self, view: PredictionView) -> TableView:
        return TableView(
            title="Prediction",
            columns=["Likelihood"],
            rows=[[view.percentage_text]],
            styles=[[_style("prediction", view.band)]],
            caption=f"Likelihood of user {view.user_id} performing {view.event_name}",
        )

    def best_time_card(self, view: BestTimeView) -> TableView:
        if not view.determinable:
            return TableView(
                title="Best Time",
                columns=["Best Time"],
                rows=[],
                empty_message="Unable to determine best time for this user",
            )
        return TableView(
            title="Best Time",
            columns=["Best Time"],
            rows=[[view.text]],
            styles=[["best-time"]],
            caption=f"Best time to send notifications to user {view.user_id}",
        )
