from __future__ import annotations

import argparse

from ..application.use_cases.query_data import QUERY_TARGETS
from ..domain.models import FilterOperator, TimePeriod

_OPERATORS = ", ".join(op.value for op in FilterOperator)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="InsightAxis analytics dashboard (JSON command line)")
    ap.add_argument("--url", default=None, help="Backend base URL; defaults to $INSIGHTAXIS_URL")
    sub = ap.add_subparsers(dest="cmd", required=True)

    # Users
    sub.add_parser("users")
    add_user_subparser(sub, "user")
    add_user_subparser(sub, "user-events")
    add_user_subparser(sub, "delete-user")
    cu = sub.add_parser("create-user")
    cu.add_argument("--id", dest="user_id", required=True)
    cu.add_argument("--name", required=True)
    cu.add_argument("--email", required=True)
    cu.add_argument("--country", default=None)
    cu.add_argument("--age", default=None)
    uu = add_user_subparser(sub, "update-user")
    uu.add_argument("--set", dest="props", action="append", default=[], help="User property key=value; can repeat")

    # Events
    ev = sub.add_parser("events")
    ev.add_argument("--limit", type=int, default=None, help="Rows to show; defaults to $INSIGHTAXIS_EVENTS_LIMIT or 10")
    sub.add_parser("event").add_argument("--id", dest="event_id", required=True)
    ce = sub.add_parser("create-event")
    ce.add_argument("--name", dest="event_name", required=True)
    ce.add_argument("--user-id", required=True)
    ce.add_argument("--prop", action="append", default=[], help="Event property key=value; can repeat")

    # Structured queries
    q = sub.add_parser("query")
    q.add_argument("target", choices=list(QUERY_TARGETS))
    q.add_argument("--user-id", default=None, help="Required for the user-events target")
    q.add_argument("--where", action="append", default=[], help=f"Filter field:OPERATOR:value; can repeat. Known operators: {_OPERATORS}")
    q.add_argument("--aggregate", action="append", default=[], help="Aggregation field:TYPE:alias; can repeat")
    q.add_argument("--select", action="append", default=[], help="Grouping/projection field; can repeat")
    q.add_argument("--order-by", action="append", default=[], help="Sort key field[:ASC|DESC]; can repeat")
    q.add_argument("--limit", type=int, default=None)
    q.add_argument("--offset", type=int, default=None)
    sub.add_parser("event-distribution")

    # Segmentation
    rfm = sub.add_parser("rfm")
    rfm.add_argument("--recency-days", type=int, default=30)
    rfm.add_argument("--segments", type=int, default=5)
    co = sub.add_parser("cohorts")
    co.add_argument("--period", default=TimePeriod.WEEK.value, type=str.upper, choices=[p.value for p in TimePeriod])
    co.add_argument("--periods", type=int, default=4)
    co.add_argument("--event", default="login")

    # ML
    rc = add_user_subparser(sub, "recommend")
    rc.add_argument("--max", type=int, default=5)
    pop = sub.add_parser("popular")
    pop.add_argument("--max", type=int, default=5)
    pr = add_user_subparser(sub, "predict")
    pr.add_argument("--event", required=True)
    add_user_subparser(sub, "best-time")

    # System
    sub.add_parser("config")
    sub.add_parser("save")
    sub.add_parser("load")

    return ap


def add_user_subparser(sub, name):
    """
    Adds a subcommand that targets a single user.

    Args:
        sub: The subparsers object from argparse.
        name: The name of the subcommand to add.

    Returns:
        argparse.ArgumentParser: The configured subparser, for extra arguments.
    """
    result = sub.add_parser(name)
    result.add_argument("--id", "--user-id", dest="user_id", required=True)
    return result
