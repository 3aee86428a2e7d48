import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from devcamper.application.errors import QueryParameterError
from devcamper.infrastructure.logging import get_logger
from devcamper.interfaces.api.v1.schemas.pagination import ListingResponse, PageLink, PaginationMeta

logger = get_logger(__name__)

CONTROL_KEYS = frozenset({"select", "sort", "page", "limit"})
OPERATOR_TOKENS = {
    "gt": "$gt",
    "gte": "$gte",
    "lt": "$lt",
    "lte": "$lte",
    "in": "$in",
}
LIST_OPERATOR_TOKENS = frozenset({"$in"})
DEFAULT_LIMIT = 25
DEFAULT_SORT = "-created_at"
MAX_KEY_DEPTH = 5
# Largest row offset or row count a SQL backend accepts as a bound parameter.
MAX_ROW_POSITION = 2**63 - 1

_KEY_PATTERN = re.compile(r"^(?P<root>[^\[\]]+)(?P<segments>(?:\[[^\[\]]*\])*)$")
_SEGMENT_PATTERN = re.compile(r"\[([^\[\]]*)\]")
_INTEGER_PREFIX_PATTERN = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class Populate:
    path: str
    select: tuple[str, ...] | None = None


@dataclass(frozen=True)
class SortField:
    field: str
    descending: bool = False


class DocumentQuery(Protocol):
    def select(self, fields: Sequence[str]) -> "DocumentQuery": ...

    def sort(self, spec: Sequence[SortField]) -> "DocumentQuery": ...

    def skip(self, count: int) -> "DocumentQuery": ...

    def limit(self, count: int) -> "DocumentQuery": ...

    def populate(self, descriptor: Populate) -> "DocumentQuery": ...

    def all(self) -> list[dict[str, Any]]: ...


class Collection(Protocol):
    name: str

    def find(self, predicate: dict[str, Any]) -> DocumentQuery: ...

    def count_documents(self) -> int: ...


def _split_key(key: str) -> list[str]:
    match = _KEY_PATTERN.match(key)
    if match is None:
        raise QueryParameterError(f"malformed key '{key}'")
    segments = _SEGMENT_PATTERN.findall(match.group("segments"))
    if len(segments) > MAX_KEY_DEPTH:
        raise QueryParameterError(f"key '{key}' is nested too deeply")
    if any(segment == "" for segment in segments[:-1]):
        raise QueryParameterError(f"malformed key '{key}'")
    return [match.group("root"), *segments]


def _assign(target: dict[str, Any], path: list[str], value: str, key: str) -> None:
    node = target
    for segment in path[:-1]:
        child = node.setdefault(segment, {})
        if not isinstance(child, dict):
            raise QueryParameterError(f"conflicting values for '{key}'")
        node = child

    leaf = path[-1]
    if leaf == "":
        raise QueryParameterError(f"malformed key '{key}'")
    if isinstance(node.get(leaf), dict):
        raise QueryParameterError(f"conflicting values for '{key}'")
    if leaf not in node:
        node[leaf] = value
    elif isinstance(node[leaf], list):
        node[leaf].append(value)
    else:
        node[leaf] = [node[leaf], value]


def parse_query_params(items: Iterable[tuple[str, str]]) -> dict[str, Any]:
    """Decode query string pairs into a nested map using bracket notation.

    ``tuition[gt]=5000`` becomes ``{"tuition": {"gt": "5000"}}``; repeated keys
    and ``key[]`` suffixes collect into lists.
    """
    params: dict[str, Any] = {}
    for key, value in items:
        path = _split_key(key)
        if len(path) > 1 and path[-1] == "":
            _assign(params, path[:-1], value, key)
            container = params
            for segment in path[:-2]:
                container = container[segment]
            if not isinstance(container[path[-2]], list):
                container[path[-2]] = [container[path[-2]]]
            continue
        _assign(params, path, value, key)
    return params


def _split_list_operand(value: Any) -> list[Any]:
    values = value if isinstance(value, list) else [value]
    operands: list[Any] = []
    for item in values:
        if isinstance(item, str):
            operands.extend(part.strip() for part in item.split(",") if part.strip())
        else:
            operands.append(item)
    return operands


def _translate_node(node: dict[str, Any]) -> dict[str, Any]:
    translated: dict[str, Any] = {}
    for key, value in node.items():
        token = OPERATOR_TOKENS.get(key, key)
        if isinstance(value, dict):
            translated[token] = _translate_node(value)
        elif token in LIST_OPERATOR_TOKENS:
            translated[token] = _split_list_operand(value)
        else:
            translated[token] = value
    return translated


def translate_operators(params: dict[str, Any]) -> dict[str, Any]:
    """Rewrite reserved comparison keys below each field into storage operator tokens.

    Top-level keys are field names and are never rewritten, so a field called
    ``in`` keeps its name.
    """
    return {
        field: _translate_node(value) if isinstance(value, dict) else value
        for field, value in params.items()
    }


def build_filter(params: dict[str, Any]) -> dict[str, Any]:
    residual = {key: value for key, value in params.items() if key not in CONTROL_KEYS}
    return translate_operators(residual)


def _control_value(params: dict[str, Any], key: str) -> str | None:
    value = params.get(key)
    if value is None:
        return None
    if isinstance(value, dict):
        raise QueryParameterError(f"'{key}' does not accept nested values")
    if isinstance(value, list):
        return ",".join(str(item) for item in value)
    return str(value)


def _split_fields(raw: str) -> list[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


def resolve_projection(select: str | None) -> tuple[str, ...] | None:
    if select is None:
        return None
    fields = tuple(dict.fromkeys(_split_fields(select)))
    return fields or None


def resolve_sort(sort: str | None) -> tuple[SortField, ...]:
    entries = _split_fields(sort) if sort is not None else []
    if not entries:
        entries = [DEFAULT_SORT]

    spec: list[SortField] = []
    for entry in entries:
        descending = entry.startswith("-")
        field = entry.lstrip("-+").strip()
        if not field:
            raise QueryParameterError(f"malformed sort entry '{entry}'")
        spec.append(SortField(field=field, descending=descending))
    return tuple(spec)


def parse_positive_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    match = _INTEGER_PREFIX_PATTERN.match(value)
    if match is None:
        return default
    parsed = int(match.group(1))
    return parsed if parsed > 0 else default


def paginate(page_value: str | None, limit_value: str | None, *, total: int, default_limit: int) -> PaginationMeta:
    page = parse_positive_int(page_value, 1)
    limit = min(parse_positive_int(limit_value, default_limit), MAX_ROW_POSITION)
    start_index = (page - 1) * limit
    end_index = page * limit
    return PaginationMeta(
        page=page,
        limit=limit,
        start_index=start_index,
        end_index=end_index,
        next=PageLink(page=page + 1, limit=limit) if end_index < total else None,
        previous=PageLink(page=page - 1, limit=limit) if start_index > 0 else None,
    )


def build_envelope(documents: list[dict[str, Any]], pagination: PaginationMeta) -> dict[str, Any]:
    return ListingResponse(count=len(documents), pagination=pagination, data=documents).model_dump()


def run_advanced_results(
    collection: Collection,
    params: dict[str, Any],
    *,
    populate: Populate | None = None,
    default_limit: int = DEFAULT_LIMIT,
) -> dict[str, Any]:
    """Filter, project, sort, paginate and expand one page of ``collection``.

    ``populate`` comes from the route declaration only. Pagination links are
    computed against the size of the whole collection, not the filtered subset.
    """
    predicate = build_filter(params)
    query = collection.find(predicate)

    fields = resolve_projection(_control_value(params, "select"))
    if fields is not None:
        query = query.select(fields)
    query = query.sort(resolve_sort(_control_value(params, "sort")))

    total = collection.count_documents()
    pagination = paginate(
        _control_value(params, "page"),
        _control_value(params, "limit"),
        total=total,
        default_limit=default_limit,
    )

    if pagination.start_index > MAX_ROW_POSITION:
        # No store can hold a row this far in, so the page is empty.
        documents: list[dict[str, Any]] = []
    else:
        query = query.skip(pagination.start_index).limit(pagination.limit)
        if populate is not None:
            query = query.populate(populate)
        documents = query.all()

    logger.debug(
        "advanced_results_built",
        collection=collection.name,
        filter_fields=sorted(predicate),
        page=pagination.page,
        limit=pagination.limit,
        total=total,
        count=len(documents),
    )
    return build_envelope(documents, pagination)
