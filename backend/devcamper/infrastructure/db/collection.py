from collections.abc import Sequence
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy import JSON, String, cast, false, func, inspect, or_, select
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.sql import ColumnElement

from devcamper.application.errors import QueryParameterError, ValidationError
from devcamper.application.services.advanced_results_service import Populate, SortField
from devcamper.infrastructure.db.session import Base

# Storage operator tokens mapped to SQLAlchemy column methods.
OPERATOR_METHODS = {
    "$gt": "__gt__",
    "$gte": "__ge__",
    "$lt": "__lt__",
    "$lte": "__le__",
    "$in": "in_",
}

TRUE_VALUES = frozenset({"true", "1", "yes", "on"})
FALSE_VALUES = frozenset({"false", "0", "no", "off"})
# Signed 64-bit bounds for integer operands bound into SQL.
SQL_INTEGER_MIN = -(2**63)
SQL_INTEGER_MAX = 2**63 - 1


def private_fields(model: type[Base]) -> frozenset[str]:
    return getattr(model, "__private_fields__", frozenset())


def public_columns(model: type[Base]) -> dict[str, Any]:
    hidden = private_fields(model)
    return {attr.key: attr for attr in inspect(model).column_attrs if attr.key not in hidden}


def serialize_document(entity: Base, fields: Sequence[str] | None = None) -> dict[str, Any]:
    model = type(entity)
    primary_keys = {column.key for column in inspect(model).primary_key}
    document: dict[str, Any] = {}
    for key in public_columns(model):
        if fields is not None and key not in fields and key not in primary_keys:
            continue
        document[key] = getattr(entity, key)
    return document


def _coerce_scalar(column: Any, field: str, value: Any) -> Any:
    if not isinstance(value, str):
        return value
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return value

    try:
        if python_type is bool:
            lowered = value.strip().lower()
            if lowered in TRUE_VALUES:
                return True
            if lowered in FALSE_VALUES:
                return False
            raise ValueError(value)
        if python_type is int:
            number = int(value)
            if not SQL_INTEGER_MIN <= number <= SQL_INTEGER_MAX:
                raise QueryParameterError(f"value '{value}' is out of range for field '{field}'")
            return number
        if python_type is float:
            return float(value)
        if python_type is Decimal:
            return Decimal(value)
        if python_type is datetime:
            return datetime.fromisoformat(value)
        if python_type is date:
            return date.fromisoformat(value)
    except (ValueError, InvalidOperation) as exc:
        raise ValidationError(f"Invalid value '{value}' for field '{field}'") from exc
    return value


class SqlDocumentQuery:
    def __init__(self, db: Session, model: type[Base], conditions: list[ColumnElement]):
        self._db = db
        self._model = model
        self._columns = public_columns(model)
        self._conditions = conditions
        self._fields: tuple[str, ...] | None = None
        self._order_by: list[Any] = []
        self._offset: int | None = None
        self._limit: int | None = None
        self._populates: list[Populate] = []

    def select(self, fields: Sequence[str]) -> "SqlDocumentQuery":
        self._fields = tuple(field for field in fields if field in self._columns)
        return self

    def sort(self, spec: Sequence[SortField]) -> "SqlDocumentQuery":
        order_by = []
        for sort_field in spec:
            attr = self._columns.get(sort_field.field)
            if attr is None:
                raise QueryParameterError(f"unknown sort field '{sort_field.field}'")
            column = getattr(self._model, attr.key)
            if isinstance(column.type, JSON):
                raise QueryParameterError(f"list field '{sort_field.field}' cannot be sorted")
            order_by.append(column.desc() if sort_field.descending else column.asc())
        primary_keys = [column.key for column in inspect(self._model).primary_key]
        sorted_fields = {sort_field.field for sort_field in spec}
        order_by.extend(getattr(self._model, key).asc() for key in primary_keys if key not in sorted_fields)
        self._order_by = order_by
        return self

    def skip(self, count: int) -> "SqlDocumentQuery":
        self._offset = count
        return self

    def limit(self, count: int) -> "SqlDocumentQuery":
        self._limit = count
        return self

    def populate(self, descriptor: Populate) -> "SqlDocumentQuery":
        if descriptor.path not in inspect(self._model).relationships:
            raise ValueError(f"{self._model.__name__} has no relationship '{descriptor.path}'")
        self._populates.append(descriptor)
        return self

    def all(self) -> list[dict[str, Any]]:
        query = select(self._model).where(*self._conditions).order_by(*self._order_by)
        if self._offset:
            query = query.offset(self._offset)
        if self._limit is not None:
            query = query.limit(self._limit)
        for descriptor in self._populates:
            query = query.options(selectinload(getattr(self._model, descriptor.path)))

        entities = self._db.execute(query).scalars().all()
        return [self._to_document(entity) for entity in entities]

    def _to_document(self, entity: Base) -> dict[str, Any]:
        document = serialize_document(entity, self._fields)
        for descriptor in self._populates:
            related = getattr(entity, descriptor.path)
            if related is None:
                document[descriptor.path] = None
            elif isinstance(related, list):
                document[descriptor.path] = [serialize_document(item, descriptor.select) for item in related]
            else:
                document[descriptor.path] = serialize_document(related, descriptor.select)
        return document


class SqlCollection:
    """Document-style access to one mapped model, used by the advanced results pipeline."""

    def __init__(self, db: Session, model: type[Base]):
        self.db = db
        self.model = model
        self.name = model.__tablename__
        self._columns = public_columns(model)

    def find(self, predicate: dict[str, Any]) -> SqlDocumentQuery:
        conditions: list[ColumnElement] = []
        for field, value in predicate.items():
            conditions.extend(self._conditions_for(field, value))
        return SqlDocumentQuery(self.db, self.model, conditions)

    def count_documents(self) -> int:
        return int(self.db.execute(select(func.count()).select_from(self.model)).scalar_one())

    def _conditions_for(self, field: str, value: Any) -> list[ColumnElement]:
        attr = self._columns.get(field)
        if attr is None:
            # Unknown and private fields match nothing.
            return [false()]
        column = getattr(self.model, attr.key)
        if isinstance(column.type, JSON):
            return self._json_conditions(column, field, value)

        if isinstance(value, dict):
            conditions = []
            for token, operand in value.items():
                method = OPERATOR_METHODS.get(token)
                if method is None or isinstance(operand, dict):
                    raise QueryParameterError(f"unsupported operator '{token}' for '{field}'")
                if token == "$in":
                    operands = operand if isinstance(operand, list) else [operand]
                    coerced: Any = [_coerce_scalar(column, field, item) for item in operands]
                elif isinstance(operand, list):
                    raise QueryParameterError(f"'{token}' expects a single value for '{field}'")
                else:
                    coerced = _coerce_scalar(column, field, operand)
                conditions.append(getattr(column, method)(coerced))
            return conditions

        if isinstance(value, list):
            return [column.in_([_coerce_scalar(column, field, item) for item in value])]
        return [column == _coerce_scalar(column, field, value)]

    def _json_conditions(self, column: Any, field: str, value: Any) -> list[ColumnElement]:
        # JSON list columns match when any element equals one of the requested values.
        if isinstance(value, dict):
            unsupported = set(value) - {"$in"}
            if unsupported:
                raise QueryParameterError(f"unsupported operator for list field '{field}'")
            value = value["$in"]
        values = value if isinstance(value, list) else [value]
        if not values:
            return [false()]
        as_text = cast(column, String)
        return [or_(*(as_text.contains(f'"{item}"') for item in values))]
