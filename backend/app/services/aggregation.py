"""Run pipelines and point queries against the datastore.

Every public helper here either returns the complete, validated result or
raises ``DataAccessError``. Cursors are always drained in full; nothing is
retried.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Sequence, TypeVar

from bson.errors import BSONError
from pydantic import BaseModel, ValidationError
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from backend.app.core.errors import DataAccessError
from backend.app.services.pipeline import Stage, render_pipeline

logger = logging.getLogger(__name__)

RowT = TypeVar("RowT", bound=BaseModel)

# Server and network failures, documents the driver cannot encode or decode,
# and rows that do not fit their schema.
DATA_ERRORS = (PyMongoError, BSONError, ValidationError)


@asynccontextmanager
async def data_access(operation: str):
    """Turn driver errors and malformed rows into ``DataAccessError``.

    The original exception is logged for operators and dropped from the
    raised error's chain. An ``ExceptionGroup`` from concurrent reads is
    mapped the same way when every error in it is a data error.
    """
    try:
        yield
    except DATA_ERRORS:
        logger.exception("Database error, could not %s", operation)
        raise DataAccessError(operation) from None
    except ExceptionGroup as group:
        _, other = group.split(DATA_ERRORS)
        if other is not None:
            raise
        logger.exception("Database error, could not %s", operation)
        raise DataAccessError(operation) from None


async def aggregate_documents(db: AsyncDatabase, collection: str, stages: Sequence[Stage]) -> list[dict]:
    cursor = await db[collection].aggregate(render_pipeline(stages))
    return await cursor.to_list(length=None)


async def aggregate_rows(
    db: AsyncDatabase,
    collection: str,
    stages: Sequence[Stage],
    row_model: type[RowT],
    *,
    operation: str,
) -> list[RowT]:
    async with data_access(operation):
        documents = await aggregate_documents(db, collection, stages)
        return [row_model.model_validate(doc) for doc in documents]


async def find_one_row(
    db: AsyncDatabase,
    collection: str,
    query: dict[str, Any],
    row_model: type[RowT],
    *,
    operation: str,
) -> RowT | None:
    """Point lookup; ``None`` when no document matches."""
    async with data_access(operation):
        document = await db[collection].find_one(query, projection={"_id": 0})
        if document is None:
            return None
        return row_model.model_validate(document)


async def find_rows(
    db: AsyncDatabase,
    collection: str,
    row_model: type[RowT],
    *,
    operation: str,
    projection: dict[str, Any] | None = None,
    sort: Sequence[tuple[str, int]] | None = None,
) -> list[RowT]:
    async with data_access(operation):
        cursor = db[collection].find({}, projection={"_id": 0, **(projection or {})})
        if sort:
            cursor = cursor.sort(list(sort))
        documents = await cursor.to_list(length=None)
        return [row_model.model_validate(doc) for doc in documents]
