import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from quizbox.core.auth import Identity, create_token
from quizbox.core.database import get_db
from quizbox.main import app
from quizbox.models.orm import Base, User
from quizbox.services.repository import QuizRepository


@pytest.fixture
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def repo(db):
    return QuizRepository(db)


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_user(db, email="owner@example.com", name="Owner"):
    user = User(email=email, name=name, password_hash="x")
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def owner(db):
    user = make_user(db)
    return Identity(user_id=user.id, email=user.email)


@pytest.fixture
def stranger(db):
    user = make_user(db, email="stranger@example.com", name=None)
    return Identity(user_id=user.id, email=user.email)


def bearer(identity):
    return {"Authorization": f"Bearer {create_token(identity.user_id, identity.email)}"}
