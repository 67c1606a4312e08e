"""Hand-rolled collaborators shared by the service and router tests."""

from dataclasses import replace
from datetime import datetime, UTC
from itertools import count

from personapi.enrichment import EnrichmentOutcome
from personapi.errors import PersonNotFoundError
from personapi.models import PagedResult


class DummyResponse:
    def __init__(self, payload=None, status_code=200, invalid_json=False):
        self.payload = payload
        self.status_code = status_code
        self.invalid_json = invalid_json

    def json(self):
        if self.invalid_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self.payload


class FakeEnricher:
    def __init__(self, outcome=None, error=None):
        self.outcome = outcome or EnrichmentOutcome()
        self.error = error
        self.calls = []

    def enrich(self, name):
        self.calls.append(name)
        if self.error is not None:
            raise self.error
        return self.outcome


class FakeStore:
    """In-memory stand-in for :class:`personapi.db.PersonStore`."""

    def __init__(self, *people):
        self.rows = {}
        self.created = []
        self.updated = []
        self.list_calls = []
        self._ids = count(1)
        for person in people:
            self.rows[person.id] = person

    def create(self, person):
        self.created.append(person)
        saved = replace(person, id=next(self._ids), created_at=datetime.now(UTC))
        self.rows[saved.id] = saved
        return saved

    def update(self, person_id, person):
        if person_id not in self.rows:
            raise PersonNotFoundError(person_id)
        self.updated.append((person_id, person))
        self.rows[person_id] = person
        return person

    def delete(self, person_id):
        if self.rows.pop(person_id, None) is None:
            raise PersonNotFoundError(person_id)

    def get(self, person_id):
        try:
            return self.rows[person_id]
        except KeyError:
            raise PersonNotFoundError(person_id) from None

    def list(self, params):
        self.list_calls.append(params)
        items = sorted(self.rows.values(), key=lambda p: p.id)
        return PagedResult(items=items[params.offset:params.offset + params.limit], total=len(items))
