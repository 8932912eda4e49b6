# tests/test_cli.py

import os
import sqlite3

import pytest

from cli.review_wrong_answers import export_wrong_answers, remove_wrong_answer, show_wrong_answers, sort_wrong_answers
from cli.run_practice_test import ask_resume, print_generation_log
from exam_core.generator import generate_test
from exam_core.schema import Question, WrongAnswer, WrongAnswerTemp
from exam_core.session import ExamSession
from exam_store.sample_bank import generate_sample_bank
from exam_store.storage import ExamStorage


def make_wrong(qid, chapter, timestamp, wrong_count):
    q = Question(qid=qid, text="?", options=("A", "B"), correct_index=0, chapter=chapter)
    return WrongAnswer(qid=qid, timestamp=timestamp, question=q, wrong_count=wrong_count)


@pytest.fixture
def notebook():
    return [
        make_wrong("12-1-001", "第12章", "2025-03-02T10:00:00", 1),
        make_wrong("3-2-001", "第3章", "2025-03-03T10:00:00", 2),
        make_wrong("3-1-005", "第3章", "2025-03-01T10:00:00", 4),
    ]


def test_export_skips_empty_notebook(tmp_path):
    db = str(tmp_path / "cli.db")
    assert export_wrong_answers(db, str(tmp_path / "w.json")) is None
    assert not os.path.exists(tmp_path / "w.json")


def test_export_and_show_notebook(tmp_path):
    db = str(tmp_path / "cli.db")
    q = generate_sample_bank(chapters={"第7章": 1})[0]
    ExamStorage(db).save_wrong_answer(WrongAnswerTemp(qid=q.qid, timestamp="t", question=q, user_option_index=0))

    path = export_wrong_answers(db, str(tmp_path / "w.json"))
    assert os.path.exists(path)
    show_wrong_answers(db)
    show_wrong_answers(db, sort_by="chapter")


def test_sort_newest_first(notebook):
    assert [w.qid for w in sort_wrong_answers(notebook, "time")] == ["3-2-001", "12-1-001", "3-1-005"]


def test_sort_by_wrong_count(notebook):
    assert [w.qid for w in sort_wrong_answers(notebook, "count")] == ["3-1-005", "3-2-001", "12-1-001"]


def test_sort_by_chapter_then_knowledge_point(notebook):
    assert [w.qid for w in sort_wrong_answers(notebook, "chapter")] == ["3-1-005", "3-2-001", "12-1-001"]


def test_sort_unknown_key_rejected(notebook):
    with pytest.raises(ValueError):
        sort_wrong_answers(notebook, "difficulty")


def test_remove_wrong_answer_from_cli(tmp_path):
    db = str(tmp_path / "cli.db")
    bank = generate_sample_bank(chapters={"第7章": 2})
    storage = ExamStorage(db)
    for q in bank:
        storage.save_wrong_answer(WrongAnswerTemp(qid=q.qid, timestamp="t", question=q, user_option_index=0))

    assert remove_wrong_answer(bank[0].qid, db) is True
    assert remove_wrong_answer("99-9-999", db) is False
    assert [w.qid for w in storage.get_wrong_answers()] == [bank[1].qid]


def test_corrupt_saved_test_is_cleared(tmp_path):
    db = str(tmp_path / "cli.db")
    storage = ExamStorage(db)
    conn = sqlite3.connect(db)
    conn.execute("INSERT OR REPLACE INTO kv_store VALUES (?, ?)", ("currentTest", "{not json"))
    conn.commit()
    conn.close()

    session = ExamSession(generate_sample_bank(per_chapter=1), storage)
    assert ask_resume(session) is False
    assert storage.get_current_test() is None


def test_print_generation_log_shows_tiers(capsys):
    result = generate_test(generate_sample_bank(per_chapter=2), 12, seed=1)
    print_generation_log(result.log)
    assert "Tier" in capsys.readouterr().out
