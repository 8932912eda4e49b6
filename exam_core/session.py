# exam_core/session.py

"""
Phiên làm bài thi thử: NotStarted -> InProgress -> Completed.

Trong InProgress có thể đi tới / lùi giữa các câu; mỗi câu có một ô trả lời
(None cho tới khi chọn). Lưu trữ (đề đang làm, kết quả, sổ câu sai) đi qua
đối tượng store, ví dụ exam_store.storage.ExamStorage.
"""

from __future__ import annotations

import logging
import random
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Sequence

from .generator import GeneratedTest, generate_test
from .schema import Answer, GenerationLog, Question, Test, TestResult, generate_test_id
from .scoring import collect_wrong_answers, score_test

logger = logging.getLogger(__name__)


class SessionError(Exception):
    """Thao tác không hợp lệ với trạng thái phiên hiện tại."""


class SessionStatus(str, Enum):
    NOT_STARTED = "NotStarted"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"


def _now() -> str:
    return datetime.now().isoformat()


class ExamSession:
    def __init__(self, bank: Sequence[Question], store, rng: Optional[random.Random] = None):
        self.bank = list(bank)
        self.store = store
        self.rng = rng or random.Random()
        self.active_test: Optional[Test] = None
        self.last_result: Optional[TestResult] = None
        self.last_log: Optional[GenerationLog] = None

    # ---------- trạng thái ----------

    @property
    def status(self) -> SessionStatus:
        if self.active_test is not None and not self.active_test.completed:
            return SessionStatus.IN_PROGRESS
        if self.last_result is not None:
            return SessionStatus.COMPLETED
        return SessionStatus.NOT_STARTED

    @property
    def current_question(self) -> Optional[Question]:
        if not self.active_test:
            return None
        return self.active_test.questions[self.active_test.current_question_index]

    @property
    def selected_answer(self) -> Optional[int]:
        if not self.active_test:
            return None
        return self.active_test.answers[self.active_test.current_question_index].selected_option_index

    @property
    def is_last_question(self) -> bool:
        if not self.active_test:
            return False
        return self.active_test.current_question_index == len(self.active_test.questions) - 1

    @property
    def progress(self) -> Dict[str, float]:
        if not self.active_test:
            return {"current": 0, "total": 0, "percentage": 0.0}
        current = self.active_test.current_question_index + 1
        total = len(self.active_test.questions)
        return {"current": current, "total": total, "percentage": current * 100.0 / total}

    def _require_active(self) -> Test:
        if self.active_test is None or self.active_test.completed:
            raise SessionError("Không có bài thi đang làm")
        return self.active_test

    # ---------- vòng đời ----------

    def start_new_test(self, num_questions: int = 10) -> Optional[Test]:
        """
        Sinh đề mới và lưu làm đề hiện tại.
        num_questions = 0: chỉ reset trạng thái và xoá đề đang lưu.
        """
        if num_questions == 0:
            self.active_test = None
            self.last_result = None
            self.store.clear_current_test()
            return None

        generated: GeneratedTest = generate_test(self.bank, num_questions, rng=self.rng)
        self.last_log = generated.log
        if not generated.questions:
            raise SessionError("Không thể sinh đề, hãy kiểm tra ngân hàng câu hỏi")

        questions = generated.questions
        answers = [
            Answer(qid=q.qid, question_index=i, correct_option_index=q.correct_index)
            for i, q in enumerate(questions)
        ]
        test = Test(id=generate_test_id(), questions=questions, answers=answers, start_time=_now())

        self.active_test = test
        self.last_result = None
        self.store.save_current_test(test)
        logger.info(f"Bắt đầu bài thi {test.id} với {len(questions)}/{num_questions} câu")
        return test

    def resume(self) -> Optional[Test]:
        """Khôi phục bài thi chưa nộp từ store (nếu có)."""
        saved = self.store.get_current_test()
        if saved is None or saved.completed:
            return None
        self.active_test = saved
        return saved

    def select_answer(self, option_index: int) -> Answer:
        test = self._require_active()
        question = self.current_question
        if not (0 <= option_index < len(question.options)):
            raise SessionError(f"Phương án {option_index} không hợp lệ cho câu {question.qid}")

        idx = test.current_question_index
        answer = test.answers[idx]
        answer.selected_option_index = option_index
        answer.is_correct = option_index == question.correct_index
        self.store.save_current_test(test)
        return answer

    def go_to_next(self) -> Optional[TestResult]:
        """Sang câu tiếp theo; ở câu cuối thì nộp bài và trả về kết quả."""
        test = self._require_active()
        if self.selected_answer is None:
            raise SessionError("Cần chọn đáp án trước khi sang câu tiếp theo")
        if self.is_last_question:
            return self.submit()
        test.current_question_index += 1
        self.store.save_current_test(test)
        return None

    def go_to_previous(self) -> None:
        test = self._require_active()
        if test.current_question_index == 0:
            return
        test.current_question_index -= 1
        self.store.save_current_test(test)

    def submit(self) -> TestResult:
        """Chấm điểm, gộp câu sai vào sổ, lưu kết quả và xoá đề hiện tại."""
        test = self._require_active()
        test.completed = True
        test.end_time = _now()

        result = score_test(test, test.end_time)
        for temp in collect_wrong_answers(test, test.end_time):
            self.store.save_wrong_answer(temp)
        self.store.save_test_result(result)
        self.store.clear_current_test()

        self.active_test = None
        self.last_result = result
        logger.info(f"Nộp bài {result.id}: {result.score}/{result.total} ({result.percentage}%)")
        return result

    def exit_test(self) -> None:
        """Thoát về menu; tiến độ được lưu để làm tiếp."""
        if self.active_test is not None and not self.active_test.completed:
            self.store.save_current_test(self.active_test)
        self.active_test = None

    def wrong_answers(self) -> List:
        return self.store.get_wrong_answers()
