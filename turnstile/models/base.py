"""Base model class for GitHub API payloads."""

from datetime import datetime
from typing import Any, Optional

import pendulum
from pydantic import BaseModel


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an API timestamp into an aware datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return pendulum.parse(str(value))


class ApiModel(BaseModel):
    """Base model for objects decoded from API responses."""

    class Config:
        """Pydantic config."""

        extra = "ignore"
        frozen = True
