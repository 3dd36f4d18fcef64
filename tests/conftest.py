"""
Pytest fixtures for the rider notification triggers.

Provides fakes for the external collaborators:
- Rider directory (Drivers collection)
- FCM sender
- Firestore snapshots and trigger events
"""

import pytest
from types import SimpleNamespace

from utils.assignment_notifier import AssignmentNotifier
from utils.assignment_rules import AssignmentRequestRule, ManualAssignmentRule
from utils.token_resolver import TokenResolver


class FakeDirectory:
    """In-memory rider directory."""

    def __init__(self, records=None, error=None):
        self.records = records or {}
        self.error = error
        self.lookups = []

    def lookup(self, key):
        self.lookups.append(key)
        if self.error is not None:
            raise self.error
        return self.records.get(key)


class FakeSender:
    """Records payloads instead of calling FCM."""

    def __init__(self, error=None):
        self.error = error
        self.sent = []

    def send(self, payload):
        if self.error is not None:
            raise self.error
        self.sent.append(payload)
        return f"projects/test/messages/{len(self.sent)}"


class FakeSnapshot:
    """Minimal stand-in for google.cloud.firestore.DocumentSnapshot."""

    def __init__(self, doc_id, data=None):
        self.id = doc_id
        self._data = data

    def to_dict(self):
        return None if self._data is None else dict(self._data)


@pytest.fixture
def directory():
    return FakeDirectory({"r1": {"fcmToken": "tok1"}, "rider42": {"riderFcmToken": "tok42"}})


@pytest.fixture
def sender():
    return FakeSender()


@pytest.fixture
def resolver(directory):
    return TokenResolver(directory)


@pytest.fixture
def offer_notifier(resolver, sender):
    return AssignmentNotifier(AssignmentRequestRule(), resolver, sender)


@pytest.fixture
def manual_notifier(resolver, sender):
    return AssignmentNotifier(ManualAssignmentRule(), resolver, sender)


def make_created_firestore_event(doc_id, data, event_id="evt-1"):
    return SimpleNamespace(
        id=event_id,
        data=FakeSnapshot(doc_id, data),
        params={"assignmentId": doc_id},
    )


def make_updated_firestore_event(order_id, before, after, event_id="evt-2", params=None):
    return SimpleNamespace(
        id=event_id,
        data=SimpleNamespace(before=FakeSnapshot(order_id, before), after=FakeSnapshot(order_id, after)),
        params={"orderId": order_id} if params is None else params,
    )
