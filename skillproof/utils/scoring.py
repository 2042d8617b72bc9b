from __future__ import annotations
from typing import Dict, Iterable, Tuple


def score_answers(questions: Iterable, answers: Dict[int, str]) -> int:
    """
    questions: вопросы теста (id, correct_answer, points)
    answers: {question_id: ответ}
    Балл за вопрос начисляется только при точном совпадении строки
    с correct_answer. Частичного зачёта нет, лишние id игнорируются.
    """
    score = 0
    for q in questions:
        given = answers.get(q.id)
        if given is not None and given == q.correct_answer:
            score += q.points
    return score


def total_points(questions: Iterable) -> int:
    return sum(q.points for q in questions)


def evaluate(questions: Iterable, answers: Dict[int, str], passing_score: int) -> Tuple[int, bool]:
    """(score, passed); passing_score сравнивается с суммой баллов напрямую."""
    score = score_answers(questions, answers)
    return score, score >= passing_score
