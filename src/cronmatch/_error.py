from __future__ import annotations

from typing import Literal

CronMatchErrorKind = Literal["field", "matcher", "pattern"]


class CronMatchError(Exception):
    kind: CronMatchErrorKind
    field: str | None

    def __init__(
        self,
        kind: CronMatchErrorKind,
        message: str,
        field: str | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.field = field

    @classmethod
    def field_value(cls, message: str, field: str | None = None) -> CronMatchError:
        return cls("field", message, field)

    @classmethod
    def matcher(cls, message: str, field: str | None = None) -> CronMatchError:
        return cls("matcher", message, field)

    @classmethod
    def pattern(cls, message: str) -> CronMatchError:
        return cls("pattern", message)

