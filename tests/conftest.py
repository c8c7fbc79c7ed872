import logging
from datetime import datetime, timedelta, timezone

import pytest

from connectioncheck.config import set_config
from connectioncheck.logging_config import LOGGER_NAME
from connectioncheck.trace.core import ProbeKind, ProbeOutcome

BASE_TIME = datetime(2025, 3, 14, 9, 30, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    for name in (
        "CONNECTIONCHECK_PROBE_TIMEOUT",
        "CONNECTIONCHECK_IP_LOOKUP_URL",
        "CONNECTIONCHECK_IP_LOOKUP_TIMEOUT",
        "CONNECTIONCHECK_BRAND",
    ):
        monkeypatch.delenv(name, raising=False)
    set_config(None)
    yield
    set_config(None)
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def make_outcome(target, index=0, kind=ProbeKind.NONE, output="", error=None,
                 seconds=1.0, start=BASE_TIME):
    return ProbeOutcome(
        target=target,
        index=index,
        started_at=start,
        finished_at=start + timedelta(seconds=seconds),
        output=output,
        kind=kind,
        error=error,
    )


@pytest.fixture
def outcome_factory():
    return make_outcome
