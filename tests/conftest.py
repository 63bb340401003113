# tests/conftest.py
"""Shared fixtures: an in-memory SQL document store, a fake auth service and local storage."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import datetime, timedelta, timezone
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from logitrack.auth.provider import AuthProvider, AuthUser
from logitrack.clients import Clients
from logitrack.database import create_tables
from logitrack.errors import AuthorizationError
from logitrack.storage.local_provider import LocalStorageProvider
from logitrack.store.sql_store import SqlDocumentStore

ADMIN_TOKEN = "admin-token"
USER_TOKEN = "user-token"


class FakeClock:
    """Starts at 2024-01-01 UTC and moves one second per call."""

    def __init__(self):
        self.now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        self.now += timedelta(seconds=1)
        return self.now


class FakeAuthProvider(AuthProvider):
    def __init__(self):
        self.users: dict[str, AuthUser] = {}
        self.tokens: dict[str, str] = {}
        self.fail_claims = False

    def add_user(self, uid, email, claims=None, token=None, **kwargs) -> AuthUser:
        user = AuthUser(uid=uid, email=email, custom_claims=dict(claims or {}), **kwargs)
        self.users[uid] = user
        if token:
            self.tokens[token] = uid
        return user

    def verify_id_token(self, token):
        uid = self.tokens.get(token)
        if uid is None:
            raise AuthorizationError("unauthenticated", "User must be authenticated")
        return {"uid": uid, **self.users[uid].custom_claims}

    def get_user(self, uid):
        return self.users.get(uid)

    def list_users(self, max_results=1000):
        return list(self.users.values())[:max_results]

    def create_user(self, email, password, display_name):
        uid = f"uid-{len(self.users) + 1}"
        return self.add_user(uid, email, display_name=display_name)

    def set_custom_claims(self, uid, claims):
        if self.fail_claims:
            raise RuntimeError("auth service unavailable")
        self.users[uid].custom_claims = dict(claims)


@pytest.fixture
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    create_tables(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine):
    return SqlDocumentStore(sessionmaker(bind=engine, autocommit=False, autoflush=False), clock=FakeClock())


@pytest.fixture
def auth():
    provider = FakeAuthProvider()
    provider.add_user("admin-1", "boss@logitrack.co.th", {"role": "admin", "admin": True},
                      token=ADMIN_TOKEN, display_name="Boss")
    provider.add_user("user-1", "driver@logitrack.co.th", {"role": "user", "admin": False},
                      token=USER_TOKEN, display_name="Driver")
    return provider


@pytest.fixture
def storage(tmp_path):
    return LocalStorageProvider(str(tmp_path / "storage"), "http://testserver")


@pytest.fixture
def clients(store, auth, storage):
    return Clients(store=store, auth=auth, storage=storage)


@pytest.fixture
def admin_claims():
    return {"uid": "admin-1", "role": "admin", "admin": True}


def make_truck_payload(**overrides):
    payload = {
        "ownershipType": "own",
        "licensePlate": "กก-1234",
        "province": "Bangkok",
        "vin": "1HGCM82633A004352",
        "engineNumber": "4JJ1123456",
        "truckStatus": "active",
        "brand": "Isuzu",
        "model": "FRR 210",
        "year": "2021",
        "color": "White",
        "type": "6-wheel",
        "seats": "3",
        "driver": "Somchai",
        "fuelType": "diesel",
        "engineCapacity": "5193",
        "fuelCapacity": 200,
        "maxLoadWeight": "",
        "imageFrontRight": "http://testserver/fr.jpg",
        "imageFrontLeft": "http://testserver/fl.jpg",
        "imageBackRight": "http://testserver/br.jpg",
        "imageBackLeft": "http://testserver/bl.jpg",
        "documentTax": "http://testserver/tax.pdf",
        "documentRegister": "http://testserver/register.pdf",
        "insuranceType": "2+",
        "insurancePremium": "18500",
    }
    payload.update(overrides)
    return payload


def make_subcontractor_payload(**overrides):
    payload = {
        "name": "Siam Haulage",
        "type": "individual",
        "idCardNumber": "1101700203450",
        "contactPerson": "Niran",
        "phone": "081-234-5678",
        "email": "niran@siamhaulage.co.th",
        "status": "active",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def truck_payload():
    return make_truck_payload


@pytest.fixture
def subcontractor_payload():
    return make_subcontractor_payload
