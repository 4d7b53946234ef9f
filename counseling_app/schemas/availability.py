from datetime import time
from typing import List

from pydantic import BaseModel, ConfigDict


class SlotPayload(BaseModel):
    """One proposed slot. Day and time formats are checked by the schedule
    validator so that every rule violation is reported the same way."""

    day: str
    start_time: str
    end_time: str


class SetAvailabilityPayload(BaseModel):
    slots: List[SlotPayload]


class SlotResponse(BaseModel):
    id: int
    day: str
    start_time: time
    end_time: time

    model_config = ConfigDict(from_attributes=True)


class AvailabilityResponse(BaseModel):
    psikolog_id: int
    version: int
    slots: List[SlotResponse]
