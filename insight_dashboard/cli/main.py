from __future__ import annotations

import json
import sys
from dataclasses import asdict, is_dataclass
from typing import Any, Dict, Optional, Sequence

from ..application.dto import CohortRequest, CreateEventRequest, CreateUserRequest, RFMRequest
from ..application.query_builder import build_query, parse_aggregate, parse_filter, parse_order
from ..application.use_cases.entities import EntityUseCase
from ..application.use_cases.ml_insights import MLInsightsUseCase
from ..application.use_cases.query_data import QueryDataUseCase
from ..application.use_cases.segmentation import SegmentationUseCase
from ..domain.errors import DashboardError, RequestError, ValidationError
from ..domain.interfaces import AnalyticsBackend
from ..infrastructure.config import events_table_limit
from ..infrastructure.http.transport import RequestsTransport
from ..infrastructure.insightaxis.client import InsightAxisClient
from ..infrastructure.logging import get_logger
from .parsers import build_parser

logger = get_logger("insight_dashboard.cli")


def _to_jsonable(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _to_jsonable(v) for k, v in value.items()}
    return value


def _emit(payload: Dict[str, Any]) -> None:
    print(json.dumps(_to_jsonable(payload), indent=2, default=str))


def _parse_props(pairs: Sequence[str]) -> Dict[str, Any]:
    """Parse repeated key=value user or event properties."""
    props: Dict[str, Any] = {}
    for raw in pairs or []:
        if "=" not in raw:
            raise ValidationError(f"Invalid property '{raw}'; expected key=value")
        k, v = raw.split("=", 1)
        k = k.strip()
        if not k:
            raise ValidationError(f"Invalid property '{raw}'; key cannot be empty")
        props[k] = v.strip()
    return props


def _error_payload(ex: Exception) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"status": "error", "error": str(ex), "kind": type(ex).__name__}
    if isinstance(ex, RequestError):
        payload["status_code"] = ex.status_code
        payload["body"] = ex.body_text
    return payload


def build_backend(url: Optional[str] = None) -> AnalyticsBackend:
    return InsightAxisClient(RequestsTransport(base_url=url))


def run(argv: Optional[Sequence[str]] = None) -> int:
    ns = build_parser().parse_args(argv)
    try:
        backend = build_backend(ns.url)
        return dispatch_commands(ns, backend)
    except ValidationError as ex:
        _emit(_error_payload(ex))
        return 2
    except DashboardError as ex:
        logger.error("Command failed | cmd=%s | %s", ns.cmd, ex)
        _emit(_error_payload(ex))
        return 3


def dispatch_commands(ns, backend: AnalyticsBackend) -> int:
    """Run one parsed command against the backend and print its JSON result.

    Raises:
        ValidationError: Bad input; nothing was sent.
        DashboardError: Backend or network failure.
    """
    cmd = ns.cmd
    if cmd in ("query", "event-distribution"):
        return run_query(ns, backend)
    if cmd in ("rfm", "cohorts"):
        return run_segmentation(ns, backend)
    if cmd in ("recommend", "popular", "predict", "best-time"):
        return run_ml(ns, backend)
    if cmd in ("users", "user", "user-events", "delete-user", "create-user", "update-user", "events", "event", "create-event"):
        return run_entities(ns, backend)
    if cmd in ("config", "save", "load"):
        return run_system(ns, backend)
    _emit({"status": "error", "error": f"Unknown command: {cmd}"})
    return 2


def run_query(ns, backend: AnalyticsBackend) -> int:
    use_case = QueryDataUseCase(backend)
    if ns.cmd == "event-distribution":
        rows = use_case.event_distribution()
        _emit({"status": "ok", "distribution": rows})
        return 0

    query = build_query(
        [parse_filter(w) for w in ns.where],
        [parse_aggregate(a) for a in ns.aggregate],
        list(ns.select),
        order_by=[parse_order(o) for o in ns.order_by],
        limit=ns.limit,
        offset=ns.offset,
    )
    result = use_case.execute(ns.target, query, user_id=ns.user_id)
    _emit(
        {
            "status": "ok",
            "target": ns.target,
            "query": query.to_json(),
            "rows": result.rows,
            "aggregations": result.aggregations,
        }
    )
    return 0


def run_segmentation(ns, backend: AnalyticsBackend) -> int:
    use_case = SegmentationUseCase(backend)
    if ns.cmd == "rfm":
        rows = use_case.rfm(RFMRequest(recency_days=ns.recency_days, num_segments=ns.segments))
        _emit({"status": "ok", "segments": rows})
        return 0
    matrix = use_case.cohorts(CohortRequest(time_period=ns.period, num_periods=ns.periods, target_event_name=ns.event))
    _emit({"status": "ok", "cohorts": matrix})
    return 0


def run_ml(ns, backend: AnalyticsBackend) -> int:
    use_case = MLInsightsUseCase(backend)
    if ns.cmd == "recommend":
        _emit({"status": "ok", "user_id": ns.user_id, "recommendations": use_case.recommendations(ns.user_id, ns.max)})
    elif ns.cmd == "popular":
        _emit({"status": "ok", "popular": use_case.popular_items(ns.max)})
    elif ns.cmd == "predict":
        _emit({"status": "ok", "prediction": use_case.prediction(ns.user_id, ns.event)})
    else:
        _emit({"status": "ok", "best_time": use_case.best_time(ns.user_id)})
    return 0


def run_entities(ns, backend: AnalyticsBackend) -> int:
    use_case = EntityUseCase(backend)
    cmd = ns.cmd
    if cmd == "users":
        _emit({"status": "ok", "users": use_case.list_users()})
    elif cmd == "user":
        _emit({"status": "ok", "user": use_case.get_user(ns.user_id)})
    elif cmd == "user-events":
        _emit({"status": "ok", "user_id": ns.user_id, "events": use_case.user_events(ns.user_id)})
    elif cmd == "delete-user":
        _emit({"status": "ok", "result": use_case.delete_user(ns.user_id)})
    elif cmd == "create-user":
        req = CreateUserRequest(user_id=ns.user_id, name=ns.name, email=ns.email, country=ns.country, age=ns.age)
        _emit({"status": "ok", "result": use_case.create_user(req)})
    elif cmd == "update-user":
        _emit({"status": "ok", "result": use_case.update_user(ns.user_id, _parse_props(ns.props))})
    elif cmd == "events":
        limit = ns.limit if ns.limit is not None else events_table_limit()
        _emit({"status": "ok", "events": use_case.list_events(limit)})
    elif cmd == "event":
        _emit({"status": "ok", "event": use_case.get_event(ns.event_id)})
    else:
        req = CreateEventRequest(event_name=ns.event_name, user_id=ns.user_id, properties=_parse_props(ns.prop))
        _emit({"status": "ok", "result": use_case.create_event(req)})
    return 0


def run_system(ns, backend: AnalyticsBackend) -> int:
    use_case = EntityUseCase(backend)
    if ns.cmd == "config":
        _emit({"status": "ok", "config": use_case.system_config()})
    elif ns.cmd == "save":
        _emit({"status": "ok", "result": use_case.save_data()})
    else:
        _emit({"status": "ok", "result": use_case.load_data()})
    return 0


def main() -> int:
    return run(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(main())
