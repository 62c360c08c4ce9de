from __future__ import annotations
from typing import Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .config import SECTIONS


class _Camel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SectionMetric(_Camel):
    visits: int = Field(0, ge=0)
    total_dwell_ms: int = Field(0, ge=0)
    confusion_count: int = Field(0, ge=0)
    help_triggered_count: int = Field(0, ge=0)


class SessionRecord(_Camel):
    model_config = ConfigDict(frozen=True)

    id: int
    duration_seconds: float = Field(..., ge=0, allow_inf_nan=False)
    confusion_events_at_completion: int = Field(..., ge=0)
    help_triggered_at_completion: int = Field(..., ge=0)
    completed: bool
    completed_at: float = Field(..., allow_inf_nan=False)


class LogEntry(_Camel):
    action: str
    section: str
    severity: Literal["info", "success", "warning", "error"] = "info"
    at: float


def _empty_sections() -> Dict[str, SectionMetric]:
    return {s: SectionMetric() for s in SECTIONS}


class AggregateState(_Camel):
    """
    Everything the dashboard needs that survives a restart. Gaze points and the
    event log are deliberately not part of it.
    """
    sections: Dict[str, SectionMetric] = Field(default_factory=_empty_sections)
    total_confusion_events: int = Field(0, ge=0)
    total_help_triggered: int = Field(0, ge=0)
    conversion_count: int = Field(0, ge=0)
    sessions: List[SessionRecord] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_invariants(self) -> "AggregateState":
        if set(self.sections) != set(SECTIONS):
            raise ValueError(f"sections must be exactly {SECTIONS}, got {sorted(self.sections)}")
        if self.total_confusion_events != sum(m.confusion_count for m in self.sections.values()):
            raise ValueError("totalConfusionEvents does not match section confusion counts")
        if self.total_help_triggered != sum(m.help_triggered_count for m in self.sections.values()):
            raise ValueError("totalHelpTriggered does not match section help counts")
        if self.conversion_count > len(self.sessions):
            raise ValueError("conversionCount exceeds number of sessions")
        return self


def empty_state() -> AggregateState:
    return AggregateState()
