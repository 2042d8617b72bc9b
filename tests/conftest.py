import os

# до импорта пакета: общая in-memory SQLite вместо файла app.db
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.pop("DEBUG", None)

import json
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from skillproof import models
from skillproof.database import Base, SessionLocal, engine
from skillproof.main import app


@pytest.fixture
def db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(full_name="John Doe", **kwargs):
        counter["n"] += 1
        user = models.User(
            full_name=full_name,
            email=kwargs.pop("email", f"user{counter['n']}@skillmail.com"),
            password_hash=kwargs.pop("password_hash", "hashed_password"),
            **kwargs,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_skill(db):
    def _make(name="Welding", category="Technical", **kwargs):
        skill = models.Skill(name=name, category=category, **kwargs)
        db.add(skill)
        db.commit()
        db.refresh(skill)
        return skill

    return _make


@pytest.fixture
def make_user_skill(db):
    def _make(user, skill, verified=False):
        user_skill = models.UserSkill(
            user_id=user.id,
            skill_id=skill.id,
            is_verified=verified,
            verification_date=datetime.utcnow() if verified else None,
        )
        db.add(user_skill)
        db.commit()
        db.refresh(user_skill)
        return user_skill

    return _make


@pytest.fixture
def make_test(db):
    """Мини-тест с вопросами [(correct_answer, points), ...]."""

    def _make(skill, questions=(("a", 50), ("b", 50)), passing_score=80, is_active=True, title="Safety Test"):
        test = models.MiniTest(
            skill_id=skill.id,
            title=title,
            passing_score=passing_score,
            is_active=is_active,
        )
        for index, (answer, points) in enumerate(questions, start=1):
            test.questions.append(models.TestQuestion(
                question_text=f"Question {index}",
                question_type="multiple_choice",
                options=json.dumps(["a", "b", "c"]),
                correct_answer=answer,
                points=points,
                order_index=index,
            ))
        db.add(test)
        db.commit()
        db.refresh(test)
        return test

    return _make
