from __future__ import annotations

import json
from pathlib import Path
from typing import List, Dict, Any

import yaml
from sqlalchemy.orm import Session

from skillproof.models.skill import Skill
from skillproof.models.testbank import MiniTest, TestQuestion, QUESTION_TYPES
from skillproof.utils.logger import logger


# Корневая папка с YAML-файлами мини-тестов
CATALOG_ROOT = Path(__file__).resolve().parents[1] / "tests_catalog"


class CatalogError(Exception):
    """Исключение при проблемах с каталогом тестов."""
    pass


def _load_yaml(path: Path) -> Dict[str, Any]:
    """Читает YAML и возвращает dict. Бросает CatalogError при ошибке."""
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise CatalogError(f"Ошибка чтения YAML {path}: {e}") from e
    if not isinstance(data, dict):
        raise CatalogError(f"Формат YAML должен быть объектом (mapping): {path}")
    return data


def discover_tests(root: Path | None = None) -> List[Path]:
    """
    Ищет все файлы вида v*.yaml / v*.yml в каталоге тестов.
    Возвращает отсортированный список путей.
    """
    root = Path(root) if root else CATALOG_ROOT
    if not root.exists():
        return []
    return sorted([p for p in root.rglob("v*.y*ml") if p.is_file()])


def _validate_meta(meta: Dict[str, Any], path: Path) -> Dict[str, Any]:
    required = ("skill", "category", "title", "passing_score")
    missing = [k for k in required if k not in meta]
    if missing:
        raise CatalogError(f"{path}: отсутствуют meta поля: {', '.join(missing)}")

    try:
        passing_score = int(meta["passing_score"])
        time_limit = int(meta["time_limit"]) if meta.get("time_limit") is not None else None
    except (TypeError, ValueError) as e:
        raise CatalogError(f"{path}: passing_score и time_limit должны быть целыми числами") from e

    skill = str(meta["skill"]).strip()
    title = str(meta["title"]).strip()
    if not skill or not title:
        raise CatalogError(f"{path}: meta.skill и meta.title не могут быть пустыми")

    return {
        "skill": skill,
        "category": str(meta["category"]).strip(),
        "skill_description": meta.get("skill_description"),
        "title": title,
        "description": meta.get("description"),
        "time_limit": time_limit,
        "passing_score": passing_score,
    }


def _validate_question(raw: Dict[str, Any], index: int, path: Path) -> Dict[str, Any]:
    if not isinstance(raw, dict):
        raise CatalogError(f"{path}: вопрос #{index} должен быть объектом")
    for key in ("text", "type", "answer", "points"):
        if key not in raw:
            raise CatalogError(f"{path}: вопрос #{index}: нет поля '{key}'")

    qtype = str(raw["type"]).strip()
    if qtype not in QUESTION_TYPES:
        raise CatalogError(f"{path}: вопрос #{index}: type должен быть одним из {list(QUESTION_TYPES)}")

    options = raw.get("options")
    if options is not None:
        if not isinstance(options, list):
            raise CatalogError(f"{path}: вопрос #{index}: options должен быть массивом")
        options = [str(o) for o in options]
    if qtype == "multiple_choice" and not options:
        raise CatalogError(f"{path}: вопрос #{index}: для multiple_choice нужны options")

    try:
        points = int(raw["points"])
    except (TypeError, ValueError) as e:
        raise CatalogError(f"{path}: вопрос #{index}: points должен быть целым числом") from e

    return {
        "question_text": str(raw["text"]),
        "question_type": qtype,
        "options": json.dumps(options) if options is not None else None,
        # YAML читает true/false как bool, а ответы сравниваются строками
        "correct_answer": str(raw["answer"]).lower() if isinstance(raw["answer"], bool) else str(raw["answer"]),
        "points": points,
        "order_index": int(raw.get("order", index)),
    }


def import_test_file(db: Session, path: Path) -> int:
    """
    Импортирует один YAML-файл теста в БД (upsert по имени навыка + названию теста).
    Вопросы теста заменяются целиком; уже начатые попытки сохраняют свой total_points.
    Возвращает id мини-теста.
    """
    data = _load_yaml(path)

    meta = _validate_meta(data.get("meta") or {}, path)
    questions = data.get("questions")
    if questions is None:
        raise CatalogError(f"{path}: отсутствует раздел 'questions'")
    if not isinstance(questions, list):
        raise CatalogError(f"{path}: 'questions' должен быть массивом")
    rows = [_validate_question(q, i, path) for i, q in enumerate(questions, start=1)]

    skill = db.query(Skill).filter(Skill.name == meta["skill"]).first()
    if not skill:
        skill = Skill(
            name=meta["skill"],
            category=meta["category"],
            description=meta["skill_description"],
        )
        db.add(skill)
        db.flush()

    test = (
        db.query(MiniTest)
        .filter(MiniTest.skill_id == skill.id, MiniTest.title == meta["title"])
        .first()
    )
    if not test:
        test = MiniTest(skill_id=skill.id, title=meta["title"], passing_score=meta["passing_score"])
        db.add(test)

    test.description = meta["description"]
    test.time_limit = meta["time_limit"]
    test.passing_score = meta["passing_score"]
    test.is_active = True
    test.questions = [TestQuestion(**row) for row in rows]

    db.commit()
    logger.info(f"Imported test '{test.title}' ({len(rows)} questions) from {path.name}")
    return test.id


def import_all(db: Session, root: Path | None = None, stop_on_error: bool = False) -> Dict[str, Any]:
    """
    Импортирует все тесты из каталога.
    Возвращает словарь: { imported: [test ids], errors: {path: error}, root: str, count: int }
    Если stop_on_error=True, при первой ошибке бросает исключение.
    """
    root = Path(root) if root else CATALOG_ROOT
    files = discover_tests(root)
    imported: List[int] = []
    errors: Dict[str, str] = {}

    for p in files:
        try:
            imported.append(import_test_file(db, p))
        except CatalogError as e:
            db.rollback()
            errors[str(p)] = str(e)
            logger.warning(f"Skipped catalog file {p}: {e}")
            if stop_on_error:
                raise

    return {"imported": imported, "errors": errors, "root": str(root), "count": len(imported)}


if __name__ == "__main__":
    # Локальный запуск: python -m skillproof.utils.test_loader
    from skillproof.database import Base, SessionLocal, engine
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        result = import_all(db)
        print("Импорт завершён:", result)
    finally:
        db.close()
