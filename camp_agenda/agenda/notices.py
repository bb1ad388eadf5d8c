"""User-facing notices (the agenda's toast messages) and mutation outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, Protocol

from loguru import logger

NoticeVariant = Literal["default", "destructive"]


@dataclass(frozen=True)
class Notice:
    """A title/description pair shown to the operator."""

    title: str
    description: str
    variant: NoticeVariant = "default"


class Notifier(Protocol):
    def notify(self, notice: Notice) -> None: ...


class NoticeLog:
    """Notifier that records every notice and mirrors it to the log."""

    def __init__(self) -> None:
        self.notices: list[Notice] = []

    def notify(self, notice: Notice) -> None:
        self.notices.append(notice)
        if notice.variant == "destructive":
            logger.warning(f"[NOTICE] {notice.title}: {notice.description}")
        else:
            logger.info(f"[NOTICE] {notice.title}: {notice.description}")

    @property
    def last(self) -> Notice | None:
        return self.notices[-1] if self.notices else None


class OutcomeKind(str, Enum):
    SUCCESS = "success"
    INVALID = "invalid"
    FAILED = "failed"
    NOTHING_TO_DO = "nothing_to_do"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class MutationOutcome:
    """Result of a store mutation or editor action.

    Attributes:
        kind: What happened (success, client-side validation failure, request
            failure, nothing to do, declined by the operator)
        notice: Notice shown to the operator, if any
        invalid_field: Violated field for validation failures
        data: Operation-specific payload (created item, export result, ...)
    """

    kind: OutcomeKind
    notice: Notice | None = None
    invalid_field: str | None = None
    data: Any = field(default=None, compare=False)

    @property
    def ok(self) -> bool:
        return self.kind == OutcomeKind.SUCCESS
