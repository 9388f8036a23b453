import os
import tempfile

os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="praisewall-uploads-"))
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("PUBLIC_BASE_URL", "http://media.test")
os.environ.setdefault("FRONTEND_BASE_URL", "http://app.test")

import pytest
from httpx import AsyncClient, ASGITransport
from mongomock_motor import AsyncMongoMockClient

from praisewall.config.database import db_config
from praisewall.services import forms as form_service


@pytest.fixture(autouse=True)
def database():
    db_config.use_client(AsyncMongoMockClient(), "praisewall_test")
    yield db_config.database
    db_config.client = None
    db_config.database = None


@pytest.fixture
async def client():
    from praisewall.main import app
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


async def register(client, email="owner@example.com", password="secret123", full_name="Owner"):
    resp = await client.post("/api/auth/register", json={
        "email": email, "password": password, "full_name": full_name,
    })
    assert resp.status_code == 201, resp.text
    body = resp.json()
    return {
        "id": body["account"]["_id"],
        "headers": {"Authorization": f"Bearer {body['access_token']}"},
        "token": body["access_token"],
    }


@pytest.fixture
async def owner(client):
    return await register(client)


@pytest.fixture
async def form():
    return await form_service.create_form("account-1", {
        "title": "Tell us about us",
        "description": "Share your experience",
        "require_approval": True,
        "allow_video": False,
    })


@pytest.fixture
async def open_form():
    return await form_service.create_form("account-1", {
        "title": "Instant wall",
        "require_approval": False,
        "allow_video": True,
    })


def submission(**overrides):
    data = {
        "name": "Ada",
        "email": "ada@example.com",
        "content": "Brilliant service",
        "rating": 5,
        "company": "",
        "image_url": "",
        "video_url": "",
        "custom_fields": {},
    }
    data.update(overrides)
    return data
