"""
Gitlytics View (Flask)

What it does:
- Accepts a GitHub username, an owner/repository pair, or a github.com URL
- Validates the input locally and catches mode mix-ups (a repo typed into the
  user search, a bare user typed into the repository search)
- Fetches precomputed analytics from the analytics backend
- Normalizes user and repository payloads into one chart model
- Renders language, commit-timeline and contributor charts (Plotly) plus tables

Setup:
  pip install -e .

Run:
  export ANALYTICS_API_BASE="http://localhost:8080/api"
  python app.py
  open http://localhost:5000

Endpoints:
  GET  /                  -> search page
  POST /search            -> resolve + fetch, then redirect to /analytics
  GET  /analytics         -> results page (?language_view=pie|bar)
  POST /back              -> drop stored results, return to search
  GET  /api/resolve       -> JSON: canonical query for mode + fields (no I/O)
  GET  /api/parse-url     -> JSON: live preview of a pasted URL
  GET  /api/analytics     -> JSON: normalized chart model
  GET  /healthz
"""

from __future__ import annotations

import logging
import threading
import uuid
from typing import Any, Dict, Optional, Tuple

from flask import Flask, jsonify, redirect, render_template, request, session, url_for

from gitlytics_view.charts import ChartBoard, ChartSurfaces, render_chart_model
from gitlytics_view.client import AnalyticsClient
from gitlytics_view.config import Settings, load_settings
from gitlytics_view.errors import AnalyticsError
from gitlytics_view.formatting import format_number
from gitlytics_view.identifiers import AccountRef, QueryRef, parse_url
from gitlytics_view.normalizer import normalize
from gitlytics_view.resolver import SearchMode, resolve_query
from gitlytics_view.state import ViewController, ViewState
from gitlytics_view.storage import ResultStore

logger = logging.getLogger(__name__)

SURFACES = ChartSurfaces(language="languageChart", commits="commitChart", contributors="contributorsChart")

FORM_FIELDS = ("username", "owner", "repo", "url")

EXAMPLES = [
    {"mode": "account", "label": "torvalds", "fields": {"username": "torvalds"}},
    {"mode": "account", "label": "gaearon", "fields": {"username": "gaearon"}},
    {"mode": "project", "label": "facebook/react", "fields": {"owner": "facebook", "repo": "react"}},
    {"mode": "project", "label": "pallets/flask", "fields": {"owner": "pallets", "repo": "flask"}},
]


# -----------------------------
# Request helpers
# -----------------------------
def _request_fields() -> Tuple[str, Dict[str, str]]:
    if request.method == "GET":
        src = request.args
    elif request.is_json:
        src = request.get_json(silent=True)
        if not isinstance(src, dict):
            src = {}
    else:
        src = request.form
    mode = _field(src, "mode") or "account"
    return mode, {k: _field(src, k) for k in FORM_FIELDS}


def _field(src: Any, key: str) -> str:
    # JSON bodies may carry numbers, lists or null where text is expected
    value = src.get(key)
    return value.strip() if isinstance(value, str) else ""


def _fields_for(ref: QueryRef) -> Dict[str, str]:
    if isinstance(ref, AccountRef):
        return {"username": ref.name, "owner": "", "repo": "", "url": ""}
    return {"username": "", "owner": ref.owner, "repo": ref.name, "url": ""}


def _query_dict(ref: QueryRef) -> Dict[str, Any]:
    out: Dict[str, Any] = {"kind": ref.kind.value, "identifier": ref.identifier}
    if isinstance(ref, AccountRef):
        out["name"] = ref.name
    else:
        out.update({"owner": ref.owner, "name": ref.name})
    return out


def _safe_mode(mode: str) -> SearchMode:
    try:
        return SearchMode.coerce(mode)
    except AnalyticsError:
        return SearchMode.ACCOUNT


def _error_json(e: AnalyticsError):
    return jsonify({"error": e.to_dict()}), e.http_status


# -----------------------------
# App factory
# -----------------------------
def create_app(
    settings: Optional[Settings] = None,
    client: Optional[AnalyticsClient] = None,
    store: Optional[ResultStore] = None,
) -> Flask:
    settings = settings or load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = Flask(__name__)
    app.config["SECRET_KEY"] = settings.secret_key
    app.jinja_env.filters["format_number"] = format_number

    client = client or AnalyticsClient(settings.api_base, timeout=settings.timeout_seconds)
    store = store or ResultStore(ttl_ms=settings.results_ttl_ms)

    views: Dict[str, ViewController] = {}
    views_lock = threading.Lock()

    def view_id() -> str:
        vid = session.get("view_id")
        if not vid:
            vid = uuid.uuid4().hex
            session["view_id"] = vid
        return vid

    def controller() -> ViewController:
        vid = view_id()
        with views_lock:
            ctl = views.get(vid)
            if ctl is None:
                ctl = views[vid] = ViewController()
            return ctl

    def search_page(fields: Dict[str, str], status: int = 200):
        state = controller().state
        error = state.error if state.view is ViewState.ERROR else None
        return (
            render_template(
                "index.html",
                mode=state.mode.value,
                fields=fields,
                error=error,
                examples=EXAMPLES,
                host=settings.web_host,
            ),
            status,
        )

    # -----------------------------
    # Pages
    # -----------------------------
    @app.route("/", methods=["GET"])
    def home():
        ctl = controller()
        if "mode" in request.args:
            ctl.switch_mode(_safe_mode(request.args["mode"]))
        return search_page(session.get("fields") or {})

    @app.route("/search", methods=["POST"])
    def search():
        mode, fields = _request_fields()
        session["fields"] = fields
        ctl = controller()

        try:
            ref = resolve_query(mode, fields, host=settings.web_host)
        except AnalyticsError as e:
            ctl.reject(_safe_mode(mode), e)
            return search_page(fields, e.http_status)

        # a URL search continues as the user/repository search it describes
        session["fields"] = fields = {**_fields_for(ref), "url": fields.get("url", "")}
        ticket = ctl.begin(SearchMode(ref.kind.value), ref)
        vid = view_id()
        try:
            result = client.fetch(ref)
        except AnalyticsError as e:
            if ctl.fail(ticket, e):
                return search_page(fields, e.http_status)
            return redirect(url_for("analytics"))

        ctl.settle(ticket, lambda: store.put(vid, result.kind, result.payload))
        return redirect(url_for("analytics"))

    @app.route("/analytics", methods=["GET"])
    def analytics():
        ctl = controller()
        ticket = ctl.state.ticket
        language_view = "bar" if request.args.get("language_view") == "bar" else "pie"
        board = ChartBoard(SURFACES.all())

        try:
            record = store.load(view_id())
            if record is None:
                state = ctl.show_empty(ticket=ticket)
            else:
                model = normalize(record.data, record.kind, host=settings.web_host)
                render_chart_model(model, board, SURFACES, language_view=language_view)
                state = ctl.show_results(model, ticket=ticket)
        except AnalyticsError as e:
            state = ctl.show_empty(e, ticket=ticket)

        return render_template(
            "analytics.html",
            state=state,
            model=state.model,
            board=board,
            surfaces=SURFACES,
            language_view=language_view,
        )

    @app.route("/back", methods=["POST"])
    def back():
        store.discard(view_id())
        controller().cancel()
        return redirect(url_for("home"))

    # -----------------------------
    # JSON API
    # -----------------------------
    @app.route("/api/resolve", methods=["GET", "POST"])
    def api_resolve():
        mode, fields = _request_fields()
        try:
            ref = resolve_query(mode, fields, host=settings.web_host)
        except AnalyticsError as e:
            return _error_json(e)
        return jsonify({"query": _query_dict(ref)})

    @app.route("/api/parse-url", methods=["GET"])
    def api_parse_url():
        url = (request.args.get("url") or "").strip()
        ref = parse_url(url, host=settings.web_host)
        if ref is None:
            return jsonify({"isValid": False, "query": None})
        return jsonify({"isValid": True, "query": _query_dict(ref)})

    @app.route("/api/analytics", methods=["GET", "POST"])
    def api_analytics():
        mode, fields = _request_fields()
        try:
            ref = resolve_query(mode, fields, host=settings.web_host)
            result = client.fetch(ref)
            model = normalize(result.payload, result.kind, host=settings.web_host)
        except AnalyticsError as e:
            return _error_json(e)
        return jsonify({"query": _query_dict(ref), "model": model.to_dict()})

    @app.route("/healthz", methods=["GET"])
    def healthz():
        return jsonify({"ok": True, "api_base": settings.api_base, "results_ttl_seconds": settings.results_ttl_seconds})

    return app


if __name__ == "__main__":
    cfg = load_settings()
    create_app(cfg).run(host="0.0.0.0", port=cfg.port, debug=True)
