import logging
import time
import uuid
from datetime import datetime, timezone

from flask import Flask, Response, jsonify, render_template, request

from api import ui_bridge
from core import config
from core.swarfarm import ProxyResponse

app = Flask(__name__)

logger = logging.getLogger(__name__)


def _generate_request_metadata() -> tuple[str, str]:
    request_id = str(uuid.uuid4())
    server_time = datetime.now(timezone.utc).isoformat()
    return request_id, server_time


def _status_for(payload: dict) -> int:
    if payload.get("ok", False):
        return 200
    return int(payload.get("http_status") or 400)


def _json_response(payload: dict, status: int = 200, *, cache_control: str | None = None):
    body = {key: value for key, value in (payload or {}).items() if key != "http_status"}
    response = jsonify(body)
    response.status_code = status
    if status == 200 and cache_control:
        response.headers["Cache-Control"] = cache_control
    else:
        response.headers["Cache-Control"] = config.NO_STORE_CACHE_CONTROL
    return response


def _log_route(route: str, request_id: str, status: int, start: float) -> None:
    duration_ms = (time.perf_counter() - start) * 1000.0
    logger.info(
        "route=%s request_id=%s status=%s duration_ms=%.2f",
        route,
        request_id,
        status,
        duration_ms,
    )


@app.route("/")
def index():
    """Render the artifact comparator page."""

    context = ui_bridge.page_context(request.args.to_dict())
    return render_template("index.html", **context)


@app.get("/api/monster/<monster_id>")
def api_monster(monster_id: str):
    """Return the Swarfarm detail document of a single monster."""

    request_id, _ = _generate_request_metadata()
    start = time.perf_counter()
    payload = ui_bridge.get_monster(monster_id)
    status = _status_for(payload)
    _log_route(f"/api/monster/{monster_id}", request_id, status, start)
    if status != 200:
        return _json_response(payload, status)
    return _json_response(
        payload["monster"], status, cache_control=config.MONSTER_CACHE_CONTROL
    )


@app.get("/api/monsters-awakened")
def api_monsters_awakened():
    """List awakened monsters, optionally filtered with ``?q=``."""

    request_id, _ = _generate_request_metadata()
    start = time.perf_counter()
    payload = ui_bridge.list_awakened_monsters(request.args.get("q"))
    status = _status_for(payload)
    _log_route("/api/monsters-awakened", request_id, status, start)
    if status != 200:
        return _json_response({"error": payload.get("error")}, status)
    return _json_response(
        {"results": payload["results"]}, status, cache_control=config.LIST_CACHE_CONTROL
    )


@app.get("/api/leader-skills")
def api_leader_skills():
    request_id, _ = _generate_request_metadata()
    start = time.perf_counter()
    payload = ui_bridge.list_leader_skills()
    status = _status_for(payload)
    _log_route("/api/leader-skills", request_id, status, start)
    if status != 200:
        return _json_response({"error": payload.get("error")}, status)
    return _json_response(
        {"results": payload["results"]}, status, cache_control=config.LIST_CACHE_CONTROL
    )


@app.get("/api/swfarm")
def api_swarfarm_proxy():
    """Forward an allow-listed ``?path=`` to the Swarfarm API."""

    request_id, _ = _generate_request_metadata()
    start = time.perf_counter()
    path = request.args.get("path", "")
    result = ui_bridge.proxy(path)
    if not isinstance(result, ProxyResponse):
        status = _status_for(result)
        _log_route("/api/swfarm", request_id, status, start)
        return _json_response({"error": result.get("error")}, status)
    _log_route("/api/swfarm", request_id, result.status, start)
    response = Response(result.body, status=result.status, content_type=result.content_type)
    response.headers["Cache-Control"] = f"public, s-maxage={config.PROXY_CACHE_MAX_AGE}"
    return response


@app.get("/api/echo/<item_id>")
def api_echo(item_id: str):
    return jsonify({"url": request.url, "id_from_params": item_id})


@app.get("/api/options")
def api_options():
    """Expose the form configuration (leader values, flat artifact options)."""

    return _json_response(ui_bridge.get_options())


@app.post("/api/compare")
def api_compare():
    """Compare two artifact builds for one creature."""

    payload = request.get_json(silent=True) or {}
    request_id, server_time = _generate_request_metadata()
    start = time.perf_counter()
    response = ui_bridge.compare_builds(payload)
    status = _status_for(response)
    _log_route("/api/compare", request_id, status, start)
    body = dict(response)
    body["request_id"] = request_id
    body["server_time"] = server_time
    return _json_response(body, status)


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    app.run(debug=True)
