"""Aggregation pipelines for the dashboard's fixed set of queries.

A pipeline is an ordered list of stage objects. Stages are plain frozen
dataclasses that render themselves to MongoDB stage documents, so the
builders below stay pure and a stage list can be inspected before anything
is sent to the server.

Ordering rules shared by every builder:

* joins and derived fields come first, so a single free-text filter can
  match joined fields and stringified numbers alike;
* the filter stage is only present when there is a search pattern;
* skip/limit always come after the filter, so pages are slices of the
  filtered result.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Sequence, Union

from bson.regex import Regex
from pymongo import ASCENDING, DESCENDING

from backend.app.db.base import CUSTOMERS, INVOICES

ITEMS_PER_PAGE = 6
LATEST_INVOICES_LIMIT = 5

INVOICE_SEARCH_FIELDS = ("customer.name", "customer.email", "status", "amountString", "dateString")
CUSTOMER_SEARCH_FIELDS = ("name", "email")


@dataclass(frozen=True)
class Join:
    from_collection: str
    local_field: str
    foreign_field: str
    as_field: str

    def to_mongo(self) -> dict:
        return {
            "$lookup": {
                "from": self.from_collection,
                "localField": self.local_field,
                "foreignField": self.foreign_field,
                "as": self.as_field,
            }
        }


@dataclass(frozen=True)
class Flatten:
    """Unwind a joined array. Rows whose join matched nothing are dropped."""

    path: str

    def to_mongo(self) -> dict:
        return {"$unwind": f"${self.path}"}


@dataclass(frozen=True)
class DeriveFields:
    fields: Mapping[str, Any]

    def to_mongo(self) -> dict:
        return {"$addFields": dict(self.fields)}


@dataclass(frozen=True)
class Filter:
    """Keep rows where ``pattern`` matches any of ``fields``."""

    pattern: Regex
    fields: tuple[str, ...]

    def to_mongo(self) -> dict:
        return {"$match": {"$or": [{name: self.pattern} for name in self.fields]}}


@dataclass(frozen=True)
class Sort:
    keys: tuple[tuple[str, int], ...]

    def to_mongo(self) -> dict:
        return {"$sort": dict(self.keys)}


@dataclass(frozen=True)
class Skip:
    count: int

    def to_mongo(self) -> dict:
        return {"$skip": self.count}


@dataclass(frozen=True)
class Limit:
    count: int

    def to_mongo(self) -> dict:
        return {"$limit": self.count}


@dataclass(frozen=True)
class Project:
    fields: Mapping[str, Any]

    def to_mongo(self) -> dict:
        return {"$project": dict(self.fields)}


@dataclass(frozen=True)
class Count:
    field: str = "count"

    def to_mongo(self) -> dict:
        return {"$count": self.field}


@dataclass(frozen=True)
class GroupSum:
    """Group the whole input into one row of conditional sums.

    Each ``(name, value)`` in ``sums`` adds ``amount_field`` for rows whose
    ``condition_field`` equals ``value``.
    """

    amount_field: str
    condition_field: str
    sums: tuple[tuple[str, str], ...]

    def to_mongo(self) -> dict:
        group: dict[str, Any] = {"_id": None}
        for name, value in self.sums:
            group[name] = {
                "$sum": {
                    "$cond": [
                        {"$eq": [f"${self.condition_field}", value]},
                        f"${self.amount_field}",
                        0,
                    ]
                }
            }
        return {"$group": group}


Stage = Union[Join, Flatten, DeriveFields, Filter, Sort, Skip, Limit, Project, Count, GroupSum]


class PipelineKind(str, Enum):
    INVOICE_LIST = "invoice-list"
    INVOICE_COUNT = "invoice-count"
    CUSTOMER_LIST = "customer-list"
    LATEST_INVOICES = "latest-invoices"
    INVOICE_STATUS_TOTALS = "invoice-status-totals"


BASE_COLLECTIONS = {
    PipelineKind.INVOICE_LIST: INVOICES,
    PipelineKind.INVOICE_COUNT: INVOICES,
    PipelineKind.CUSTOMER_LIST: CUSTOMERS,
    PipelineKind.LATEST_INVOICES: INVOICES,
    PipelineKind.INVOICE_STATUS_TOTALS: INVOICES,
}


def base_collection(kind: PipelineKind) -> str:
    return BASE_COLLECTIONS[PipelineKind(kind)]


def page_offset(page: int) -> int:
    """Number of rows to skip before ``page`` (1-based)."""
    if page < 1:
        raise ValueError(f"page must be 1 or greater, got {page}")
    return (page - 1) * ITEMS_PER_PAGE


def render_pipeline(stages: Sequence[Stage]) -> list[dict]:
    return [stage.to_mongo() for stage in stages]


def _join_customer() -> list[Stage]:
    return [
        Join(CUSTOMERS, local_field="customer_id", foreign_field="id", as_field="customer"),
        Flatten("customer"),
    ]


def invoice_search_stages(pattern: Regex | None) -> list[Stage]:
    """Join, derive and filter stages shared by the invoice list and count.

    Amount and date are copied into string fields so the one text pattern
    can match them next to the customer's name and email.
    """
    stages = _join_customer()
    stages.append(DeriveFields({"amountString": {"$toString": "$amount"}, "dateString": "$date"}))
    if pattern is not None:
        stages.append(Filter(pattern, INVOICE_SEARCH_FIELDS))
    return stages


def build_invoice_list_pipeline(pattern: Regex | None, page: int) -> list[Stage]:
    offset = page_offset(page)
    return [
        *invoice_search_stages(pattern),
        # id breaks date ties so pages never overlap
        Sort((("date", DESCENDING), ("id", DESCENDING))),
        Skip(offset),
        Limit(ITEMS_PER_PAGE),
        Project(
            {
                "_id": 0,
                "id": "$id",
                "amount": "$amount",
                "date": "$date",
                "status": "$status",
                "name": "$customer.name",
                "email": "$customer.email",
                "image_url": "$customer.image_url",
                "customer_id": "$customer.id",
            }
        ),
    ]


def build_invoice_count_pipeline(pattern: Regex | None) -> list[Stage]:
    return [*invoice_search_stages(pattern), Count("count")]


def _sum_invoices_with_status(status: str) -> dict:
    return {
        "$sum": {
            "$map": {
                "input": {
                    "$filter": {
                        "input": "$invoices",
                        "as": "invoice",
                        "cond": {"$eq": ["$$invoice.status", status]},
                    }
                },
                "as": "invoice",
                "in": "$$invoice.amount",
            }
        }
    }


def build_customer_list_pipeline(pattern: Regex | None) -> list[Stage]:
    stages: list[Stage] = [
        Join(INVOICES, local_field="id", foreign_field="customer_id", as_field="invoices"),
        Project(
            {
                "_id": 0,
                "id": 1,
                "name": 1,
                "email": 1,
                "image_url": 1,
                "total_invoices": {"$size": "$invoices"},
                "total_pending": _sum_invoices_with_status("pending"),
                "total_paid": _sum_invoices_with_status("paid"),
            }
        ),
    ]
    if pattern is not None:
        stages.append(Filter(pattern, CUSTOMER_SEARCH_FIELDS))
    stages.append(Sort((("name", ASCENDING), ("id", ASCENDING))))
    return stages


def build_latest_invoices_pipeline() -> list[Stage]:
    return [
        *_join_customer(),
        Sort((("date", DESCENDING), ("id", DESCENDING))),
        Limit(LATEST_INVOICES_LIMIT),
        Project(
            {
                "_id": 0,
                "id": "$id",
                "amount": "$amount",
                "name": "$customer.name",
                "image_url": "$customer.image_url",
                "email": "$customer.email",
            }
        ),
    ]


def build_status_totals_pipeline() -> list[Stage]:
    return [GroupSum("amount", "status", (("paid", "paid"), ("pending", "pending")))]


def build_pipeline(kind: PipelineKind, pattern: Regex | None = None, page: int | None = None) -> list[Stage]:
    """Build the stage list for ``kind``.

    ``page`` is required for invoice lists and ignored elsewhere. An unknown
    kind raises ``ValueError``.
    """
    kind = PipelineKind(kind)
    if kind is PipelineKind.INVOICE_LIST:
        if page is None:
            raise ValueError("invoice-list pipelines need a page number")
        return build_invoice_list_pipeline(pattern, page)
    if kind is PipelineKind.INVOICE_COUNT:
        return build_invoice_count_pipeline(pattern)
    if kind is PipelineKind.CUSTOMER_LIST:
        return build_customer_list_pipeline(pattern)
    if kind is PipelineKind.LATEST_INVOICES:
        return build_latest_invoices_pipeline()
    return build_status_totals_pipeline()
