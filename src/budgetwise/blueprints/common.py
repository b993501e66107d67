"""Request helpers shared by the JSON blueprints."""

from __future__ import annotations

from datetime import datetime, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional, TypeVar

from flask import current_app, g, request
from pydantic import BaseModel, ValidationInfo
from sqlmodel import select

from ..clock import to_wall_clock, wall_clock_now
from ..errors import PayloadInvalid, Unauthorized
from ..extensions import session_scope
from ..models.user import User

USER_HEADER = "X-User-Id"
CENT = Decimal("0.01")

FormT = TypeVar("FormT", bound=BaseModel)


def current_user_id() -> int:
    """Return the id of the user named by the ``X-User-Id`` header."""

    cached = g.get("budgetwise_user_id")
    if cached is not None:
        return cached

    raw = request.headers.get(USER_HEADER, "").strip()
    try:
        user_id = int(raw)
    except ValueError as exc:
        raise Unauthorized() from exc

    with session_scope() as session:
        found = session.exec(select(User.id).where(User.id == user_id)).first()
    if found is None:
        raise Unauthorized("Unknown user")

    g.budgetwise_user_id = user_id
    return user_id


def app_timezone() -> Optional[tzinfo]:
    """Zone that stored timestamps are expressed in; None is server-local."""

    return current_app.config.get("TIMEZONE")


def local_now() -> datetime:
    return wall_clock_now(app_timezone())


def form_zone(info: ValidationInfo) -> Optional[tzinfo]:
    """Zone passed to form validation by ``parse_body``."""

    return (info.context or {}).get("timezone")


def parse_body(form_cls: type[FormT]) -> FormT:
    """Validate the JSON request body; pydantic errors render as 400."""

    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise PayloadInvalid("Request body must be a JSON object")
    return form_cls.model_validate(payload, context={"timezone": app_timezone()})


def query_datetime(name: str) -> Optional[datetime]:
    """Parse an optional ISO-8601 query parameter."""

    value = request.args.get(name)
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as exc:
        raise PayloadInvalid(errors={name: ["Expected an ISO-8601 date or datetime"]}) from exc
    return to_wall_clock(parsed, app_timezone())


def query_int(
    name: str,
    *,
    default: Optional[int] = None,
    minimum: Optional[int] = None,
    maximum: Optional[int] = None,
) -> Optional[int]:
    """Parse an optional integer query parameter, clamped to the given bounds."""

    value = request.args.get(name)
    if value in (None, ""):
        return default
    try:
        number = int(value)
    except ValueError as exc:
        raise PayloadInvalid(errors={name: ["Expected an integer"]}) from exc
    if minimum is not None:
        number = max(number, minimum)
    if maximum is not None:
        number = min(number, maximum)
    return number


def money(value: Any) -> str:
    return str(Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP))


def iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def success(status: int = 200, **payload: Any) -> tuple[dict[str, Any], int]:
    """Wrap ``payload`` in the success envelope."""

    return {"success": True, **payload}, status
