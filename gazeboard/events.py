from __future__ import annotations
import logging
import time
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

logger = logging.getLogger(__name__)


class _Wire(BaseModel):
    # accept both the page's field names and python names
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class GazePoint(_Wire):
    kind: Literal["gazePoint"] = "gazePoint"
    x: float = Field(..., allow_inf_nan=False)
    y: float = Field(..., allow_inf_nan=False)
    captured_at: float = Field(default_factory=time.time, alias="capturedAt", allow_inf_nan=False, description="epoch seconds")


class DwellEvent(_Wire):
    kind: Literal["dwellTime", "dwell"] = "dwellTime"
    section: str
    dwell_ms: float = Field(..., ge=0, allow_inf_nan=False, alias="dwellTime", description="milliseconds spent in the section")


class ConfusionEvent(_Wire):
    kind: Literal["confusionEvent"] = "confusionEvent"
    section: str


class HelpEvent(_Wire):
    kind: Literal["helpTriggered"] = "helpTriggered"
    section: str


class SessionCompleteEvent(_Wire):
    kind: Literal["sessionComplete"] = "sessionComplete"
    duration_seconds: float = Field(0.0, ge=0, allow_inf_nan=False, alias="completionTime")
    completed: bool = Field(False, alias="conversationCompleted")


Event = Annotated[
    Union[GazePoint, DwellEvent, ConfusionEvent, HelpEvent, SessionCompleteEvent],
    Field(discriminator="kind"),
]

_event_adapter: TypeAdapter = TypeAdapter(Event)


def parse_event(raw: Any) -> Optional[Event]:
    """
    Validate one stored or posted record. Returns None for anything that is not a
    well-formed event of a known kind; callers skip those.
    """
    if not isinstance(raw, dict):
        logger.info("skip non-object event: %r", raw)
        return None
    # older pages sent the tag as "type"
    if "kind" not in raw and "type" in raw:
        raw = {**raw, "kind": raw["type"]}
    try:
        return _event_adapter.validate_python(raw)
    except ValidationError as e:
        logger.info("skip malformed event kind=%r: %s", raw.get("kind"), e.error_count())
        return None
