from datetime import datetime, timedelta, timezone

import pytest

from asnlens.models import TxtAnswer


NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FakeTxtResolver:
    """Serves canned answers keyed by query name and records every query"""

    def __init__(self, answers=None):
        self.answers = dict(answers or {})
        self.queries = []
        self.closed = False

    def add(self, name, rows, ttl=3600):
        self.answers[name] = TxtAnswer(records=list(rows), ttl=timedelta(seconds=ttl))

    def fail(self, name, error):
        self.answers[name] = error

    def resolve_txt(self, name):
        self.queries.append(name)
        answer = self.answers[name]
        if isinstance(answer, Exception):
            raise answer
        return answer

    def close(self):
        self.closed = True


@pytest.fixture
def fake_resolver():
    return FakeTxtResolver()


@pytest.fixture
def clock():
    return lambda: NOW
