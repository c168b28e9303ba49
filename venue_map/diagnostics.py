"""
Structured diagnostic stream for the load/filter/render pipeline.

Every event is kept in memory (so callers and tests can inspect what
happened to each row) and forwarded to the standard ``logging`` tree.
"""

from dataclasses import dataclass, field
import logging

logger = logging.getLogger(__name__)

STAGE_LOAD = "load"
STAGE_RENDER = "render"

KIND_VALIDATION_SKIP = "validation-skip"
KIND_ROW_ERROR = "row-error"
KIND_FETCH_ERROR = "fetch-error"


@dataclass(frozen=True, slots=True)
class DiagnosticEvent:
    level: int
    stage: str
    kind: str
    message: str
    line: int | None = None


@dataclass(slots=True)
class DiagnosticLog:
    events: list[DiagnosticEvent] = field(default_factory=list)

    def record(
        self,
        level: int,
        stage: str,
        kind: str,
        message: str,
        line: int | None = None,
    ) -> DiagnosticEvent:
        event = DiagnosticEvent(level=level, stage=stage, kind=kind, message=message, line=line)
        self.events.append(event)
        where = f" (line {line})" if line is not None else ""
        logger.log(level, f"[{stage}] {message}{where}")
        return event

    def skip(self, stage: str, message: str, line: int | None = None) -> DiagnosticEvent:
        return self.record(logging.INFO, stage, KIND_VALIDATION_SKIP, message, line)

    def error(self, stage: str, kind: str, message: str, line: int | None = None) -> DiagnosticEvent:
        return self.record(logging.ERROR, stage, kind, message, line)

    def by_stage(self, stage: str) -> list[DiagnosticEvent]:
        return [event for event in self.events if event.stage == stage]

    def by_kind(self, kind: str) -> list[DiagnosticEvent]:
        return [event for event in self.events if event.kind == kind]
