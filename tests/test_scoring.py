# tests/test_scoring.py

from exam_core.schema import Answer, Question, Test, WrongAnswer, WrongAnswerTemp
from exam_core.scoring import collect_wrong_answers, merge_wrong_answer, score_test


def make_question(qid, correct=0):
    return Question(qid=qid, text=f"Q {qid}", options=("A", "B", "C", "D"), correct_index=correct, chapter="第3章")


def make_test(selected):
    questions = [make_question(f"3-1-{i:03d}", correct=0) for i in range(len(selected))]
    answers = []
    for i, (q, sel) in enumerate(zip(questions, selected)):
        answers.append(Answer(
            qid=q.qid,
            question_index=i,
            correct_option_index=q.correct_index,
            selected_option_index=sel,
            is_correct=sel == q.correct_index,
        ))
    return Test(id="t-1", questions=questions, answers=answers, start_time="2025-01-01T00:00:00")


def test_score_and_percentage_round_half_up():
    # 1/8 = 12.5% -> 13
    test = make_test([0, 1, 1, 1, 1, 1, 1, None])
    result = score_test(test, "2025-01-01T01:00:00")

    assert result.score == 1
    assert result.total == 8
    assert result.percentage == 13
    assert result.timestamp == "2025-01-01T01:00:00"


def test_score_empty_test():
    test = Test(id="t-0", questions=[], answers=[], start_time="2025-01-01T00:00:00")
    assert score_test(test).percentage == 0


def test_unanswered_is_not_a_wrong_answer():
    test = make_test([0, 2, None])
    wrong = collect_wrong_answers(test, "ts")

    assert [w.qid for w in wrong] == ["3-1-001"]
    assert wrong[0].user_option_index == 2
    assert wrong[0].question.qid == "3-1-001"


def test_merge_increments_existing_and_appends_new():
    q1, q2 = make_question("1-1-001"), make_question("1-1-002")
    book = [WrongAnswer(qid=q1.qid, timestamp="old", question=q1, wrong_count=2)]

    book = merge_wrong_answer(book, WrongAnswerTemp(qid=q1.qid, timestamp="new", question=q1, user_option_index=3))
    book = merge_wrong_answer(book, WrongAnswerTemp(qid=q2.qid, timestamp="new", question=q2, user_option_index=1))

    assert [(w.qid, w.wrong_count, w.timestamp) for w in book] == [
        ("1-1-001", 3, "new"),
        ("1-1-002", 1, "new"),
    ]
