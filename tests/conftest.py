# tests/conftest.py
import os

# in-memory SQLite stands in for PostgreSQL; must be set before the package is imported
os.environ.setdefault("POSTGRES_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from listings_admin import models
from listings_admin.db import Base, engine, SessionLocal
from listings_admin.main import app


def _make_payload(**overrides):
    payload = {
        "listingData": {"listing_type": "museum"},
        "locationTranslations": {"name_en": None, "name_ar": None, "location_id": None},
        "listingTranslations": [],
        "categoryIds": [],
        "collectionLinks": [],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def make_payload():
    return _make_payload


@pytest.fixture
def client(db):
    return TestClient(app)


@pytest.fixture
def listing(db):
    db.add_all([
        models.Listing(id="L1", listing_type="museum"),
        models.Category(id="cat-history"),
        models.Category(id="cat-art"),
        models.Category(id="cat-food"),
        models.Collection(id="col-a", name="A", slug="a"),
        models.Collection(id="col-b", name="B", slug="b"),
    ])
    db.commit()
    return "L1"