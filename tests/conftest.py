from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest


@pytest.fixture
def jst() -> timezone:
    return timezone(timedelta(hours=9))


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 2, 0, 0, 0, tzinfo=timezone.utc)
