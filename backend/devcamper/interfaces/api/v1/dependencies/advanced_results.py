from collections.abc import Callable
from typing import Any

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from devcamper.application.services.advanced_results_service import (
    DEFAULT_LIMIT,
    Populate,
    parse_query_params,
    run_advanced_results,
)
from devcamper.infrastructure.db.collection import SqlCollection
from devcamper.infrastructure.db.session import Base, get_db

STATE_KEY = "advanced_results"


def advanced_results(
    model: type[Base],
    populate: Populate | None = None,
    default_limit: int = DEFAULT_LIMIT,
) -> Callable:
    def dependency(request: Request, db: Session = Depends(get_db)) -> dict[str, Any]:
        params = parse_query_params(request.query_params.multi_items())
        envelope = run_advanced_results(
            SqlCollection(db, model),
            params,
            populate=populate,
            default_limit=default_limit,
        )
        setattr(request.state, STATE_KEY, envelope)
        return envelope

    return dependency
