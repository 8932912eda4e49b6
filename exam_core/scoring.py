# exam_core/scoring.py

from __future__ import annotations

import math
from datetime import datetime
from typing import List, Optional

from .schema import Test, TestResult, WrongAnswer, WrongAnswerTemp


def score_test(test: Test, end_time: Optional[str] = None) -> TestResult:
    """Chấm bài: score = số câu đúng, percentage làm tròn (0.5 lên)."""
    correct = sum(1 for a in test.answers if a.is_correct)
    total = len(test.questions)
    percentage = int(math.floor(correct * 100.0 / total + 0.5)) if total else 0
    return TestResult(
        id=test.id,
        timestamp=end_time or test.end_time or datetime.now().isoformat(),
        score=correct,
        total=total,
        percentage=percentage,
    )


def collect_wrong_answers(test: Test, timestamp: str) -> List[WrongAnswerTemp]:
    """Câu đã chọn đáp án nhưng sai. Câu bỏ trống không tính là sai."""
    by_qid = {q.qid: q for q in test.questions}
    out: List[WrongAnswerTemp] = []
    for answer in test.answers:
        if answer.is_correct or answer.selected_option_index is None:
            continue
        question = by_qid.get(answer.qid)
        if question is None:
            continue
        out.append(WrongAnswerTemp(
            qid=answer.qid,
            timestamp=timestamp,
            question=question,
            user_option_index=answer.selected_option_index,
        ))
    return out


def merge_wrong_answer(existing: List[WrongAnswer], temp: WrongAnswerTemp) -> List[WrongAnswer]:
    """
    Gộp một câu sai vào sổ câu sai (theo qid):
    - đã có: wrong_count + 1, cập nhật timestamp lần sai gần nhất
    - chưa có: thêm mới với wrong_count = 1
    """
    merged = list(existing)
    for i, wa in enumerate(merged):
        if wa.qid == temp.qid:
            merged[i] = WrongAnswer(
                qid=wa.qid,
                timestamp=temp.timestamp,
                question=wa.question,
                wrong_count=wa.wrong_count + 1,
            )
            return merged

    merged.append(WrongAnswer(qid=temp.qid, timestamp=temp.timestamp, question=temp.question, wrong_count=1))
    return merged
