"""Fail-closed boundary around collaborator lookups.

Every lookup the access resolver makes goes through :func:`guarded`,
which turns the outcome into one of three values:

``Found(value)``
    the collaborator returned something.
``NotFound()``
    the collaborator returned ``None``.
``LookupFailed(detail)``
    the collaborator raised. The exception is logged here and goes no
    further.

:func:`value_or_none` then collapses ``LookupFailed`` into the same
absence as ``NotFound``, so a store outage reads as "nothing there".
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar, Union

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Found(Generic[T]):
    value: T


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class LookupFailed:
    detail: str


LookupResult: TypeAlias = Union[Found[T], NotFound, LookupFailed]


async def guarded(label: str, lookup: Awaitable[T | None]) -> LookupResult[T]:
    try:
        value = await lookup
    except Exception as exc:
        logger.warning("Lookup %s failed, treating as absent", label, exc_info=True)
        return LookupFailed(detail=f"{type(exc).__name__}: {exc}")
    if value is None:
        return NotFound()
    return Found(value)


def value_or_none(result: LookupResult[T]) -> T | None:
    if isinstance(result, Found):
        return result.value
    return None
