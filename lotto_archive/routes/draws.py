"""Lottery result query routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, request

from lotto_archive.db import get_session
from lotto_archive.schemas.lottery import (
    CompleteDrawSchema,
    DateRangeQuerySchema,
    DrawHeaderSchema,
    LatestQuerySchema,
    LimitQuerySchema,
    PrizeNumberRowSchema,
    SearchHitSchema,
    SearchQuerySchema,
)
from lotto_archive.services.query_service import QueryService
from lotto_archive.utils.responses import ok

draws_bp = Blueprint("draws", __name__)

_service = QueryService()
_headers_schema = DrawHeaderSchema(many=True)
_complete_schema = CompleteDrawSchema()
_prizes_schema = PrizeNumberRowSchema(many=True)
_hits_schema = SearchHitSchema(many=True)
_limit_schema = LimitQuerySchema()
_latest_schema = LatestQuerySchema()
_range_schema = DateRangeQuerySchema()
_search_schema = SearchQuerySchema()


@draws_bp.get("/draws")
def list_between():
    args = _range_schema.load(request.args)
    draws = _service.between(get_session(), args["start"], args["end"])
    return ok(_headers_schema.dump(draws))


@draws_bp.get("/draws/latest")
def list_latest():
    args = _latest_schema.load(request.args)
    draws = _service.latest(get_session(), limit=int(args["limit"]))
    return ok(_headers_schema.dump(draws))


@draws_bp.get("/draws/year/<int:year>")
def list_by_year(year: int):
    return ok(_headers_schema.dump(_service.by_year(get_session(), year)))


@draws_bp.get("/draws/year/<int:year>/month/<int:month>")
def list_by_month(year: int, month: int):
    return ok(_headers_schema.dump(_service.by_month(get_session(), year, month)))


@draws_bp.get("/draws/after/<date_text>")
def list_after(date_text: str):
    args = _limit_schema.load(request.args)
    return ok(_headers_schema.dump(_service.after(get_session(), date_text, args["limit"])))


@draws_bp.get("/draws/before/<date_text>")
def list_before(date_text: str):
    args = _limit_schema.load(request.args)
    return ok(_headers_schema.dump(_service.before(get_session(), date_text, args["limit"])))


@draws_bp.get("/draws/<date_text>")
def get_draw(date_text: str):
    """Header plus every prize number of one draw."""

    draw = _service.get_draw(get_session(), date_text)
    return ok(_complete_schema.dump(draw))


@draws_bp.get("/prizes/<category>")
def list_by_category(category: str):
    return ok(_prizes_schema.dump(_service.by_category(get_session(), category)))


@draws_bp.get("/search")
def search_number():
    args = _search_schema.load(request.args)
    hits = _service.search_number(get_session(), args["number"])
    return ok(_hits_schema.dump([{"draw": draw, "prize": prize} for draw, prize in hits]))
