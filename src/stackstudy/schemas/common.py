"""Shared Pydantic types for API schemas."""
from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator

from stackstudy.db.time import as_utc

# Timestamps are always serialized with an explicit UTC offset.
UtcDateTime = Annotated[datetime, AfterValidator(as_utc)]
