"""
Shared test fixtures.

Sets up an isolated SQLite database so tests never touch the
real database. Tables are recreated for every test.
"""

import os
import smtplib

# Must be set before the application modules build their engine.
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from garment_pool.errors import TransportError
from garment_pool.main import app
from garment_pool.models.base import Base, get_db
from garment_pool.services.notifier import Notifier, get_notifier


TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)


# The services use SAVEPOINTs. pysqlite's implicit transaction
# handling does not support them, so SQLAlchemy emits BEGIN itself.
@event.listens_for(engine, "connect")
def _disable_pysqlite_transactions(dbapi_connection, connection_record):
    dbapi_connection.isolation_level = None


@event.listens_for(engine, "begin")
def _emit_begin(conn):
    conn.exec_driver_sql("BEGIN")


TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


class RecordingNotifier(Notifier):
    """Keeps sent mail in memory; fails for the listed recipients."""

    def __init__(self, fail_for=()):
        self.sent = []
        self.fail_for = set(fail_for)

    def send(self, to, subject, body):
        if to in self.fail_for:
            raise TransportError(f"mailbox {to} unavailable")
        self.sent.append((to, subject, body))
        return f"<{len(self.sent)}@test>"


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop them after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(db_session, notifier):
    """
    Provide a test client wired to the test session and notifier.
    """
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


class FakeSMTP:
    """Stands in for smtplib.SMTP and remembers what it was asked to do."""

    instances = []
    refuse = False

    def __init__(self, host, port, timeout=None):
        if FakeSMTP.refuse:
            raise ConnectionRefusedError("connection refused")
        self.host = host
        self.port = port
        self.calls = []
        self.sent = []
        FakeSMTP.instances.append(self)

    def starttls(self):
        self.calls.append("starttls")

    def login(self, username, password):
        self.calls.append(("login", username))

    def send_message(self, msg):
        self.sent.append(msg)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.calls.append("quit")
        return False


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    FakeSMTP.refuse = False
    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    return FakeSMTP
