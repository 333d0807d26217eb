"""
Error taxonomy and result wrapper for trafficlight.

Collaborator calls are wrapped into an Outcome so the evaluation
pipeline converts failures into terminal results in a single place.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    """평가 오류 종류"""
    CONFIG_UNAVAILABLE = "config_unavailable"
    FETCH_FAILED = "fetch_failed"
    NO_ENTITIES = "no_entities"
    UNRESOLVED_SYSTEM = "unresolved_system"
    NO_CONFIGURED_ENTITIES = "no_configured_entities"


class EvalError(Exception):
    """평가 파이프라인 오류"""

    def __init__(self, kind: ErrorKind, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.cause = cause

    def __repr__(self) -> str:
        return f"EvalError({self.kind.value}, {self.message!r})"


@dataclass
class Outcome(Generic[T]):
    """협력자 호출 결과 (값 또는 오류)"""
    value: Optional[T] = None
    error: Optional[EvalError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def attempt(awaitable: Awaitable[T], kind: ErrorKind, what: str = "") -> Outcome[T]:
    """
    awaitable을 실행하고 예외를 Outcome으로 변환합니다.

    Args:
        awaitable: 실행할 코루틴
        kind: 실패 시 기록할 오류 종류
        what: 오류 메시지에 넣을 대상 설명

    Returns:
        성공 시 값, 실패 시 EvalError를 담은 Outcome
    """
    try:
        return Outcome(value=await awaitable)
    except Exception as e:
        message = f"{what}: {e}" if what else str(e)
        return Outcome(error=EvalError(kind, message, cause=e))
