# src/utxo_gateway/utils/result.py
"""Closed result types shared by validators and backend lookups.

Callers match on the variants with ``isinstance`` and finish the chain with
``assert_never`` so an unhandled variant fails loudly instead of falling
through.
"""
from dataclasses import dataclass
from typing import Any, Generic, NoReturn, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Valid(Generic[T]):
    value: T


@dataclass(frozen=True)
class Invalid:
    message: str
    code: str = "INVALID_REQUEST"


ValidationResult = Union[Valid[T], Invalid]


@dataclass(frozen=True)
class Found(Generic[T]):
    value: T


@dataclass(frozen=True)
class NoValue:
    """No reference was supplied, so there is nothing to look up."""


@dataclass(frozen=True)
class LookupFailed:
    message: str


LookupResult = Union[Found[T], NoValue, LookupFailed]


def assert_never(value: Any) -> NoReturn:
    raise AssertionError(f"Unhandled result variant: {value!r}")
