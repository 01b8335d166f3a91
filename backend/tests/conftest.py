import os
from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")
os.environ.setdefault("SESSION_SECRET", "test-session-secret")
os.environ.setdefault("R2_PUBLIC_URL", "https://images.example.test")
os.environ.setdefault("USE_IN_MEMORY_STORAGE", "true")

from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app.models import Prompt, User
from app.services.storage_service import InMemoryStorageClient, get_storage_client

PUBLIC_URL = "https://images.example.test"


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session(engine) -> Session:
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = testing_session_local()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture()
def storage() -> InMemoryStorageClient:
    return InMemoryStorageClient()


@pytest.fixture()
def client(db_session: Session, storage: InMemoryStorageClient):
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage_client] = lambda: storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def headers_for(email: str) -> dict[str, str]:
    return {"x-dev-user-email": email}


@pytest.fixture()
def user_id(client):
    def _user_id(email: str) -> str:
        resp = client.get("/v1/me", headers=headers_for(email))
        assert resp.status_code == 200
        return resp.json()["id"]

    return _user_id


@pytest.fixture()
def admin_headers(client, db_session: Session, user_id) -> dict[str, str]:
    email = "admin@example.com"
    uid = user_id(email)
    db_session.query(User).filter(User.id == uid).update({"is_admin": True})
    db_session.commit()
    return headers_for(email)


@pytest.fixture()
def make_prompt(db_session: Session):
    def _make_prompt(
        words: tuple[str, str, str] = ("light", "water", "stone"),
        start_offset: timedelta = timedelta(days=-1),
        length: timedelta = timedelta(days=7),
    ) -> Prompt:
        week_start = datetime.now(UTC) + start_offset
        prompt = Prompt(
            word1=words[0],
            word2=words[1],
            word3=words[2],
            week_start=week_start,
            week_end=week_start + length,
        )
        db_session.add(prompt)
        db_session.commit()
        db_session.refresh(prompt)
        return prompt

    return _make_prompt


@pytest.fixture()
def uploaded_image(client, storage: InMemoryStorageClient):
    """Presign and 'upload' an image for a user, returning its public URL."""

    def _upload(email: str, file_type: str = "image/png", data: bytes = b"\x89PNG") -> str:
        resp = client.post(
            "/v1/upload/presign",
            headers=headers_for(email),
            json={"fileType": file_type, "fileSize": len(data)},
        )
        assert resp.status_code == 200
        payload = resp.json()
        storage.put_object(storage.key_from_presigned_url(payload["presignedUrl"]), data)
        return payload["publicUrl"]

    return _upload
