from __future__ import annotations

import logging
from collections.abc import AsyncIterable, AsyncIterator
from dataclasses import dataclass
from typing import TypeVar

from pydantic import TypeAdapter, ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class MalformedRecord:
    """A stream line that could not be decoded.

    Yielded in place of a record so the consumer decides whether to stop or skip.
    """

    line: str
    error: ValidationError


async def iter_ndjson(lines: AsyncIterable[str], adapter: TypeAdapter[T]) -> AsyncIterator[T | MalformedRecord]:
    """Decode newline-delimited JSON lazily, in wire order.

    Blank lines (lichess sends them as keep-alives) are skipped.
    """

    async for line in lines:
        if not line.strip():
            continue
        record: T | MalformedRecord
        try:
            record = adapter.validate_json(line)
        except ValidationError as e:
            logger.debug("Undecodable stream record: %s", line)
            record = MalformedRecord(line=line, error=e)
        yield record
