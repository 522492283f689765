"""Public API between the UI layer and the calculator backend."""
from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional

from core import config, swarfarm
from core.aggregator import CreatureBaseStats
from core.calculator import evaluate, request_from_payload
from core.numeric import clean_percent_text

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Response helpers


def _success_response(**payload: object) -> Dict[str, object]:
    response: Dict[str, object] = {"ok": True}
    response.update(payload)
    return response


def _error_response(
    code: str, message: str, *, http_status: int | None = None
) -> Dict[str, object]:
    payload: Dict[str, object] = {
        "ok": False,
        "error_code": code,
        "error_message": message,
        "error": message,
    }
    if http_status is not None:
        payload["http_status"] = int(http_status)
    return payload


def _swarfarm_error_response(exc: swarfarm.SwarfarmError) -> Dict[str, object]:
    return _error_response(exc.code, str(exc), http_status=exc.status)


# ---------------------------------------------------------------------------
# Swarfarm lookups


def get_monster(monster_id: object) -> Dict[str, object]:
    """Return the raw Swarfarm monster document for ``monster_id``."""

    try:
        monster = swarfarm.fetch_monster(monster_id)
    except swarfarm.SwarfarmError as exc:
        return _swarfarm_error_response(exc)
    return _success_response(monster=monster)


def list_awakened_monsters(term: Optional[str] = None) -> Dict[str, object]:
    """Return the monster picker list, filtered when ``term`` is given."""

    try:
        monsters = swarfarm.fetch_awakened_monsters()
    except swarfarm.SwarfarmError as exc:
        return _swarfarm_error_response(exc)
    except Exception:
        logger.exception("Unexpected error while listing monsters")
        return _error_response("unexpected_error", "Unexpected error", http_status=500)
    if term is not None:
        monsters = swarfarm.search_monsters(monsters, term)
    return _success_response(results=monsters)


def list_leader_skills() -> Dict[str, object]:
    try:
        skills = swarfarm.fetch_leader_skills()
    except swarfarm.SwarfarmError as exc:
        return _swarfarm_error_response(exc)
    except Exception:
        logger.exception("Unexpected error while listing leader skills")
        return _error_response("unexpected_error", "Unexpected error", http_status=500)
    return _success_response(results=skills)


def proxy(path: str) -> swarfarm.ProxyResponse | Dict[str, object]:
    """Forward ``path`` to Swarfarm, or return an error payload."""

    try:
        return swarfarm.proxy_get(path)
    except swarfarm.SwarfarmError as exc:
        return _swarfarm_error_response(exc)


# ---------------------------------------------------------------------------
# Comparison


def get_options() -> Dict[str, object]:
    return _success_response(**config.options_snapshot())


def compare_builds(payload: object) -> Dict[str, object]:
    """Evaluate a comparison payload.

    When ``monster_id`` is present the creature is looked up on Swarfarm and
    a failed lookup is reported as an error, never as a zeroed comparison.
    Without any creature the response carries ``result: None``.
    """

    # Anything but a JSON object is treated as an empty form.
    body: Mapping[str, object] = payload if isinstance(payload, Mapping) else {}
    creature: Optional[CreatureBaseStats] = None
    monster_id = body.get("monster_id")
    if monster_id not in (None, ""):
        try:
            creature = CreatureBaseStats.from_swarfarm(swarfarm.fetch_monster(monster_id))
        except swarfarm.SwarfarmError as exc:
            return _swarfarm_error_response(exc)

    request = request_from_payload(body, creature=creature)
    result = evaluate(request)
    if result is None:
        return _success_response(creature=None, result=None)

    logger.info(
        "Comparison evaluated creature=%s score_a=%.2f score_b=%.2f winner=%s",
        request.creature.display_name if request.creature else None,
        result.score_a,
        result.score_b,
        result.winner,
    )
    return _success_response(
        creature=request.creature.to_dict() if request.creature else None,
        leader=request.leader.to_dict(),
        siege=request.siege_active,
        result=result.to_dict(),
    )


# ---------------------------------------------------------------------------
# Server-rendered page


_FORM_AXES = ("hp", "atk", "def", "spd")
_WEIGHT_PREFIXES = ("a", "b")


def _clean_weights(form: Mapping[str, object]) -> Dict[str, str]:
    """Sanitise the percentage inputs of both artifacts.

    The HP weight keeps one decimal comma, the other axes are whole numbers.
    """

    cleaned: Dict[str, str] = {}
    for prefix in _WEIGHT_PREFIXES:
        for axis in _FORM_AXES:
            field = f"{prefix}_{axis}"
            cleaned[field] = clean_percent_text(
                form.get(field, ""), allow_decimal=axis == "hp"
            )
    return cleaned


def payload_from_form(form: Mapping[str, object]) -> Dict[str, object]:
    """Translate the flat query-string form of the page into a payload."""

    weights = _clean_weights(form)

    def build(prefix: str) -> Dict[str, object]:
        return {
            "weights": {axis: weights[f"{prefix}_{axis}"] for axis in _FORM_AXES},
            "flats": [
                form.get(f"{prefix}_flat{slot}", "")
                for slot in range(1, config.ARTIFACT_FLAT_SLOTS + 1)
            ],
        }

    return {
        "monster_id": form.get("monster_id", ""),
        "leader": {
            "attribute": form.get("leader_attr", "None"),
            "amount": form.get("leader_amount", 0),
        },
        "siege": form.get("siege", ""),
        "bonus": {axis: form.get(f"bonus_{axis}", "") for axis in _FORM_AXES},
        "artifact_a": build("a"),
        "artifact_b": build("b"),
    }


def page_context(form: Mapping[str, object]) -> Dict[str, object]:
    """Everything the comparator template needs for one render."""

    context: Dict[str, object] = {
        "form": {**dict(form), **_clean_weights(form)},
        "options": config.options_snapshot(),
        "placeholder": config.PLACEHOLDER_SELECT,
        "search_results": None,
        "comparison": None,
    }
    term = form.get("q")
    if isinstance(term, str) and term.strip():
        listing = list_awakened_monsters(term)
        context["search_results"] = listing.get("results", [])
        if not listing.get("ok"):
            context["error"] = listing.get("error_message")

    if form.get("monster_id"):
        comparison = compare_builds(payload_from_form(form))
        if comparison.get("ok"):
            context["comparison"] = comparison
        else:
            context["error"] = comparison.get("error_message")
    return context
