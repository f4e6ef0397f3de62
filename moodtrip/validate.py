"""
validate.py — Input validation for idea creation and availability updates.

Usage:
    from moodtrip.validate import CreateIdeaInput, validate_input
    data = validate_input(CreateIdeaInput, {"group_slug": "alps", "prompt": "..."})
"""

from __future__ import annotations

from typing import Any, Optional, Type, TypeVar

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from .models import BudgetLevel, ValidationError

T = TypeVar("T", bound=BaseModel)


class CreateIdeaInput(BaseModel):
    group_slug: str = Field(min_length=1, max_length=50)
    prompt: str = Field(min_length=10, max_length=500)
    budget: Optional[BudgetLevel] = None
    kids: Optional[bool] = None
    month: Optional[int] = Field(default=None, ge=1, le=12)


class AvailabilityInput(BaseModel):
    group_id: str = Field(min_length=1)
    month: int = Field(ge=1, le=12)
    score: int = Field(ge=0, le=100)


def validate_input(model: Type[T], data: Any) -> T:
    """Parse data into model or raise ValidationError listing every bad field."""
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        messages = ", ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ValidationError(f"Validation error: {messages or 'Unknown validation error'}") from e
