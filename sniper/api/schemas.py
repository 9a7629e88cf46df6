from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class PredictIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # left untyped so a bad payload gets the 400 history error, not a 422
    history: Any = None
    key: str = Field(min_length=1)
    device_id: str = Field(alias="deviceId", min_length=1)
    order: str = "newest-first"


class PredictOut(BaseModel):
    success: bool
    prediction: str
    mode: str
    reason: str
    confidence: Optional[float] = None
    status: str


class VerifyIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    key: str = Field(min_length=1)
    device_id: str = Field(alias="deviceId", min_length=1)


class VerifyOut(BaseModel):
    success: bool
    message: str


class ResetIn(BaseModel):
    key: str


class PatternsIn(BaseModel):
    history: Any = None
    order: str = "newest-first"
    min_run: int = Field(default=3, ge=1)


class PatternsOut(BaseModel):
    hands: int
    streak: int
    runs: list[tuple[int, int, str, int]]
    ping_pong: bool
    score22: int
    score21: int
