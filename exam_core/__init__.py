# exam_core/__init__.py

"""
Core module cho hệ thống luyện thi CDGA

Bao gồm:
- Schema cho Question, Test, TestResult, WrongAnswer và GenerationLog
- Bảng tỉ trọng 17 chương + nhóm ưu tiên (tier)
- Thuật toán phân bổ số câu theo chương (census -> planner)
- Bộ chọn câu và hàm sinh đề generate_test
- Chấm điểm và phiên làm bài

Các thành phần xuất khẩu phổ biến:
    Question, Test, TestResult, WrongAnswer, GenerationLog
    count_by_chapter, plan_allocation, validate_deviation
    generate_test, ExamSession
"""

# Schema models
from .schema import (
    Question,
    Answer,
    Test,
    TestResult,
    WrongAnswer,
    WrongAnswerTemp,
    UserStats,
    ChapterStat,
    GenerationLog,
    QuestionFormatError,
    generate_test_id,
)

# Chapter weights
from .chapter_weights import (
    CHAPTER_WEIGHTS,
    PRIORITY_TIERS,
    chapters_by_weight,
)

# Allocation planner
from .allocation_policy import (
    InvalidTestSizeError,
    count_by_chapter,
    plan_allocation,
    validate_deviation,
)

# Selector + generator
from .generator import (
    GeneratedTest,
    generate_test,
)

# Scoring & session
from .scoring import (
    score_test,
    collect_wrong_answers,
    merge_wrong_answer,
)
from .session import (
    ExamSession,
    SessionError,
    SessionStatus,
)


__all__ = [
    # Schema
    "Question",
    "Answer",
    "Test",
    "TestResult",
    "WrongAnswer",
    "WrongAnswerTemp",
    "UserStats",
    "ChapterStat",
    "GenerationLog",
    "QuestionFormatError",
    "generate_test_id",

    # Chapter weights
    "CHAPTER_WEIGHTS",
    "PRIORITY_TIERS",
    "chapters_by_weight",

    # Allocation
    "InvalidTestSizeError",
    "count_by_chapter",
    "plan_allocation",
    "validate_deviation",

    # Generator
    "GeneratedTest",
    "generate_test",

    # Scoring & session
    "score_test",
    "collect_wrong_answers",
    "merge_wrong_answer",
    "ExamSession",
    "SessionError",
    "SessionStatus",
]
