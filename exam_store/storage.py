"""
exam_store/storage.py
-----------------------------------
Lưu trữ cục bộ cho ứng dụng luyện thi, dạng key/value trên SQLite.

Các khóa:
- currentTest : đề đang làm dở (Test)
- testResults : 3 kết quả gần nhất (mới nhất đứng đầu)
- wrongAnswers: sổ câu sai, gộp theo qid
- userStats   : thống kê cộng dồn
"""

import json
import sqlite3
import logging
from typing import Any, List, Optional

from exam_core.schema import Test, TestResult, UserStats, WrongAnswer, WrongAnswerTemp, generate_test_id
from exam_core.scoring import merge_wrong_answer
from exam_store.config import EXAM_DB_PATH, RESULTS_KEEP

logger = logging.getLogger(__name__)

CURRENT_TEST_KEY = "currentTest"
TEST_RESULTS_KEY = "testResults"
WRONG_ANSWERS_KEY = "wrongAnswers"
USER_STATS_KEY = "userStats"


class StorageError(Exception):
    """Không đọc/ghi được dữ liệu lưu trữ."""


class ExamStorage:
    def __init__(self, db_path: str = EXAM_DB_PATH):
        self.db_path = db_path
        self._init_db()

    # ==============================
    # SQLite key/value
    # ==============================
    def _init_db(self):
        conn = sqlite3.connect(self.db_path)
        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                );
            """)
            conn.commit()
        finally:
            conn.close()

    def _get_item(self, key: str) -> Optional[Any]:
        conn = sqlite3.connect(self.db_path)
        try:
            row = conn.execute("SELECT value FROM kv_store WHERE key=?", (key,)).fetchone()
        finally:
            conn.close()
        if not row:
            return None
        try:
            return json.loads(row[0])
        except json.JSONDecodeError as e:
            raise StorageError(f"Dữ liệu hỏng tại khóa '{key}': {e}") from e

    def _set_item(self, key: str, value: Any):
        conn = sqlite3.connect(self.db_path)
        try:
            conn.execute(
                "INSERT OR REPLACE INTO kv_store VALUES (?, ?)",
                (key, json.dumps(value, ensure_ascii=False)),
            )
            conn.commit()
        finally:
            conn.close()

    def _remove_item(self, key: str):
        conn = sqlite3.connect(self.db_path)
        try:
            conn.execute("DELETE FROM kv_store WHERE key=?", (key,))
            conn.commit()
        finally:
            conn.close()

    def clear_all_data(self):
        conn = sqlite3.connect(self.db_path)
        try:
            conn.execute("DELETE FROM kv_store")
            conn.commit()
        finally:
            conn.close()
        logger.info("Đã xoá toàn bộ dữ liệu lưu trữ")

    # ==============================
    # Đề đang làm
    # ==============================
    def save_current_test(self, test: Test):
        self._set_item(CURRENT_TEST_KEY, test.to_dict())

    def get_current_test(self) -> Optional[Test]:
        data = self._get_item(CURRENT_TEST_KEY)
        return Test.from_dict(data) if data else None

    def clear_current_test(self):
        self._remove_item(CURRENT_TEST_KEY)

    # ==============================
    # Kết quả bài thi
    # ==============================
    def save_test_result(self, result: TestResult):
        """Thêm kết quả mới lên đầu, chỉ giữ RESULTS_KEEP bản ghi, rồi cập nhật thống kê."""
        results = [result] + self.get_test_results()
        self._set_item(TEST_RESULTS_KEY, [r.to_dict() for r in results[:RESULTS_KEEP]])
        self._update_stats_after_test(result)

    def get_test_results(self) -> List[TestResult]:
        data = self._get_item(TEST_RESULTS_KEY) or []
        return [TestResult.from_dict(r) for r in data]

    # ==============================
    # Sổ câu sai
    # ==============================
    def get_wrong_answers(self) -> List[WrongAnswer]:
        data = self._get_item(WRONG_ANSWERS_KEY)
        if data is None:
            return []
        return [WrongAnswer.from_dict(w) for w in data]

    def save_wrong_answer(self, temp: WrongAnswerTemp):
        """Gộp theo qid: đã có thì tăng wrong_count, chưa có thì thêm mới."""
        if temp.question is None:
            logger.error(f"Không lưu được câu sai {temp.qid}: thiếu dữ liệu câu hỏi")
            return
        merged = merge_wrong_answer(self.get_wrong_answers(), temp)
        self.save_wrong_answers(merged)
        logger.debug(f"Đã lưu câu sai {temp.qid}, sổ hiện có {len(merged)} câu")

    def save_wrong_answers(self, wrong_answers: List[WrongAnswer]):
        if not isinstance(wrong_answers, list):
            raise StorageError(f"wrong_answers phải là list, nhận {type(wrong_answers).__name__}")
        self._set_item(WRONG_ANSWERS_KEY, [w.to_dict() for w in wrong_answers])

    def remove_wrong_answer(self, qid: str) -> bool:
        """Xoá một câu khỏi sổ câu sai. Trả về False nếu không có qid đó."""
        current = self.get_wrong_answers()
        remaining = [w for w in current if w.qid != qid]
        if len(remaining) == len(current):
            return False
        self.save_wrong_answers(remaining)
        logger.info(f"Đã xoá câu {qid} khỏi sổ câu sai")
        return True

    # ==============================
    # Thống kê
    # ==============================
    def get_user_stats(self) -> UserStats:
        data = self._get_item(USER_STATS_KEY)
        return UserStats.from_dict(data) if data else UserStats()

    def update_user_stats(self, stats: UserStats):
        self._set_item(USER_STATS_KEY, stats.to_dict())

    def _update_stats_after_test(self, result: TestResult):
        current = self.get_user_stats()
        self.update_user_stats(UserStats(
            total_tests=current.total_tests + 1,
            total_questions=current.total_questions + result.total,
            correct_answers=current.correct_answers + result.score,
            wrong_answers=current.wrong_answers + (result.total - result.score),
        ))
