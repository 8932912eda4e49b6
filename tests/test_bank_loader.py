# tests/test_bank_loader.py

import json

import pytest

from exam_core.schema import Question, QuestionFormatError
from exam_store.bank_loader import QuestionBankError, load_question_bank
from exam_store.sample_bank import generate_sample_bank, save_bank


def test_load_single_file(tmp_path):
    bank = generate_sample_bank(per_chapter=2)
    path = save_bank(bank, str(tmp_path / "questionBank.json"))

    loaded = load_question_bank(path)
    assert loaded == bank


def test_load_directory_skips_invalid_entries(tmp_path):
    good = {"qid": "12-3-001", "text": "元数据", "options": ["A", "B", "C"], "correctIndex": 2, "chapter": "第12章", "difficulty": "L1"}
    bad_index = dict(good, qid="12-3-002", correctIndex=5)
    missing = {"qid": "12-3-003", "text": "?"}
    (tmp_path / "ch12").mkdir()
    (tmp_path / "ch12" / "a.json").write_text(json.dumps([good, bad_index, missing, "x"]), encoding="utf-8")

    loaded = load_question_bank(str(tmp_path))

    assert [q.qid for q in loaded] == ["12-3-001"]
    assert loaded[0].knowledge_point_id == "12-3"


def test_missing_path_raises(tmp_path):
    with pytest.raises(QuestionBankError):
        load_question_bank(str(tmp_path / "nope.json"))


def test_non_list_file_raises(tmp_path):
    path = tmp_path / "bank.json"
    path.write_text(json.dumps({"qid": "1"}), encoding="utf-8")
    with pytest.raises(QuestionBankError):
        load_question_bank(str(path))


def test_question_accepts_snake_case_keys():
    q = Question.from_dict({
        "qid": "1-4-001", "text": "t", "options": ["a", "b"],
        "correct_index": 0, "chapter": "第1章", "knowledge_point_id": "1-4",
    })
    assert q.correct_index == 0
    assert q.difficulty == "L1"


def test_question_needs_two_options():
    with pytest.raises(QuestionFormatError):
        Question(qid="1-1-001", text="t", options=("only",), correct_index=0, chapter="第1章")
