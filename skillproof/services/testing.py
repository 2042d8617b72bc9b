from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from skillproof.models.skill import UserSkill
from skillproof.models.testbank import MiniTest, TestQuestion
from skillproof.models.attempt import TestAttempt
from skillproof.services.verification import refresh_user_skill_verification
from skillproof.utils.error_handler import NotFoundError, AlreadyCompletedError, InvalidInputError
from skillproof.utils.logger import logger
from skillproof.utils.scoring import evaluate, total_points


# --------------------- Хранение ответов ---------------------

def dump_answers(answers: Dict[int, str]) -> str:
    return json.dumps({str(qid): answers[qid] for qid in sorted(answers)})


def load_answers(raw: Optional[str]) -> Dict[int, str]:
    if not raw:
        return {}
    return {int(qid): str(value) for qid, value in json.loads(raw).items()}


def decode_options(question: TestQuestion) -> Optional[List[str]]:
    if question.question_type != "multiple_choice" or not question.options:
        return None
    return [str(o) for o in json.loads(question.options)]


def question_to_dict(question: TestQuestion) -> Dict[str, Any]:
    return {
        "id": question.id,
        "test_id": question.test_id,
        "question_text": question.question_text,
        "question_type": question.question_type,
        "options": decode_options(question),
        "correct_answer": question.correct_answer,
        "points": question.points,
        "order_index": question.order_index,
    }


def _questions(db: Session, test_id: int) -> List[TestQuestion]:
    return (
        db.query(TestQuestion)
        .filter(TestQuestion.test_id == test_id)
        .order_by(TestQuestion.order_index, TestQuestion.id)
        .all()
    )


# --------------------- Операции ---------------------

def list_tests_for_skill(db: Session, skill_id: int) -> List[MiniTest]:
    return (
        db.query(MiniTest)
        .filter(MiniTest.skill_id == skill_id, MiniTest.is_active.is_(True))
        .order_by(MiniTest.id)
        .all()
    )


def list_questions(db: Session, test_id: int) -> List[Dict[str, Any]]:
    return [question_to_dict(q) for q in _questions(db, test_id)]


def start_attempt(db: Session, user_id: int, user_skill_id: int, test_id: int) -> TestAttempt:
    user_skill = db.query(UserSkill).filter(
        UserSkill.id == user_skill_id,
        UserSkill.user_id == user_id,
    ).first()
    if not user_skill:
        raise NotFoundError("User skill", user_skill_id)

    test = db.query(MiniTest).filter(MiniTest.id == test_id, MiniTest.is_active.is_(True)).first()
    if not test:
        raise NotFoundError("Mini test", test_id)

    attempt = TestAttempt(
        user_skill_id=user_skill.id,
        test_id=test.id,
        score=0,
        total_points=total_points(_questions(db, test.id)),
        passed=False,
        started_at=datetime.utcnow(),
        completed_at=None,
        answers=dump_answers({}),
    )
    db.add(attempt)
    db.commit()
    db.refresh(attempt)
    logger.info(f"Attempt {attempt.id} started: user skill {user_skill.id}, test {test.id}, total {attempt.total_points}")
    return attempt


def submit_attempt(db: Session, user_id: int, attempt_id: int, answers: Dict[int, str]) -> TestAttempt:
    """
    Завершает попытку: считает баллы, pass/fail, ставит completed_at.

    Переход Started -> Completed выполняется условным UPDATE по
    completed_at IS NULL, поэтому срабатывает ровно один раз; повторная
    отправка даёт AlreadyCompletedError и ничего не меняет.
    """
    attempt = (
        db.query(TestAttempt)
        .join(UserSkill, TestAttempt.user_skill_id == UserSkill.id)
        .filter(TestAttempt.id == attempt_id, UserSkill.user_id == user_id)
        .first()
    )
    if not attempt:
        raise NotFoundError("Test attempt", attempt_id)
    if attempt.completed_at is not None:
        raise AlreadyCompletedError(f"Test attempt already completed: {attempt_id}", {"attempt_id": attempt_id})

    try:
        answers = {int(qid): str(value) for qid, value in answers.items()}
    except (TypeError, ValueError) as e:
        raise InvalidInputError("answers must map question ids to strings") from e

    test = db.get(MiniTest, attempt.test_id)
    if not test:
        raise NotFoundError("Mini test", attempt.test_id)

    score, passed = evaluate(_questions(db, test.id), answers, test.passing_score)

    result = db.execute(
        update(TestAttempt)
        .where(TestAttempt.id == attempt.id, TestAttempt.completed_at.is_(None))
        .values(
            score=score,
            passed=passed,
            completed_at=datetime.utcnow(),
            answers=dump_answers(answers),
        )
    )
    if result.rowcount != 1:
        db.rollback()
        raise AlreadyCompletedError(f"Test attempt already completed: {attempt_id}", {"attempt_id": attempt_id})
    db.commit()
    db.refresh(attempt)
    logger.info(f"Attempt {attempt.id} completed: {score}/{attempt.total_points}, passed={passed}")

    if passed:
        refresh_user_skill_verification(db, attempt.user_skill_id)
        db.refresh(attempt)
    return attempt


def list_user_attempts(db: Session, user_id: int, skill_id: Optional[int] = None) -> List[TestAttempt]:
    query = (
        db.query(TestAttempt)
        .join(UserSkill, TestAttempt.user_skill_id == UserSkill.id)
        .filter(UserSkill.user_id == user_id)
    )
    if skill_id is not None:
        query = query.filter(UserSkill.skill_id == skill_id)
    return query.order_by(TestAttempt.started_at.desc(), TestAttempt.id.desc()).all()
