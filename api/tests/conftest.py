import pytest

from api import errors
from api.call_service import CallNotifier
from api.firebase_service import FirestoreService
from api.push_service import PushResult


class FakeDocument:
    def __init__(self, data=None):
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return dict(self._data) if self._data is not None else None


class FakeFirestore:
    """In-memory stand-in for the Firestore client"""

    def __init__(self, collections=None, error=None):
        self.collections = collections or {}
        self.error = error
        self.lookups = []

    def collection(self, name):
        return _FakeCollection(self, name)


class _FakeCollection:
    def __init__(self, db, name):
        self.db = db
        self.name = name

    def document(self, doc_id):
        return _FakeDocumentRef(self.db, self.name, doc_id)


class _FakeDocumentRef:
    def __init__(self, db, collection, doc_id):
        self.db = db
        self.collection = collection
        self.doc_id = doc_id

    def get(self):
        self.db.lookups.append((self.collection, self.doc_id))
        if self.db.error:
            raise self.db.error
        return FakeDocument(self.db.collections.get(self.collection, {}).get(self.doc_id))


class FakeGateway:
    def __init__(self, db=None, ready=True):
        self.db = db or FakeFirestore()
        self.ready = ready
        self.cause = None if ready else ValueError("bad credential")
        self.app = object()
        self.init_calls = 0

    def ensure_ready(self):
        self.init_calls += 1
        return None if self.ready else errors.configuration_error()

    def firestore(self):
        return self.db


class FakeSender:
    def __init__(self, result=None):
        self.result = result or PushResult(success=True, message_id="projects/demo/messages/1")
        self.messages = []

    def send(self, message):
        self.messages.append(message)
        return self.result


@pytest.fixture
def users():
    return {
        "u1": {"fcmToken": "tok123", "displayName": "User One"},
        "silent": {"displayName": "No Token"},
        "blank": {"fcmToken": ""},
    }


@pytest.fixture
def firestore_db(users):
    return FakeFirestore({"users": users})


@pytest.fixture
def gateway(firestore_db):
    return FakeGateway(firestore_db)


@pytest.fixture
def sender():
    return FakeSender()


@pytest.fixture
def notifier(gateway, sender):
    return CallNotifier(gateway, FirestoreService(gateway), sender)
