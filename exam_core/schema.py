# exam_core/schema.py

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional, Tuple


class QuestionFormatError(ValueError):
    """Câu hỏi trong ngân hàng sai định dạng (thiếu trường, đáp án ngoài phạm vi...)."""


def generate_test_id() -> str:
    return str(uuid.uuid4())


def _pick(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


@dataclass(frozen=True)
class Question:
    """
    Một câu hỏi trong ngân hàng đề (bất biến):
    - qid dạng "<knowledgePoint>-<seq>", ví dụ "1-4-001"
    - correct_index là chỉ số đáp án đúng trong options
    - chapter là một trong 17 chương ("第1章" ... "第17章")
    """
    qid: str
    text: str
    options: Tuple[str, ...]
    correct_index: int
    chapter: str
    difficulty: str = "L1"  # L1 | L2 | L3
    knowledge_point_id: str = ""

    def __post_init__(self):
        if not self.qid:
            raise QuestionFormatError("Câu hỏi thiếu qid")
        if not isinstance(self.options, tuple):
            object.__setattr__(self, "options", tuple(self.options))
        if len(self.options) < 2:
            raise QuestionFormatError(f"Câu {self.qid}: cần ít nhất 2 phương án, có {len(self.options)}")
        if not (0 <= self.correct_index < len(self.options)):
            raise QuestionFormatError(
                f"Câu {self.qid}: correct_index={self.correct_index} ngoài phạm vi 0..{len(self.options) - 1}"
            )
        if not self.knowledge_point_id:
            object.__setattr__(self, "knowledge_point_id", knowledge_point_from_qid(self.qid))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Question":
        """Nhận cả khóa camelCase của file ngân hàng lẫn snake_case."""
        try:
            return cls(
                qid=str(data["qid"]),
                text=str(data["text"]),
                options=tuple(str(o) for o in data["options"]),
                correct_index=int(_pick(data, "correctIndex", "correct_index")),
                chapter=str(data["chapter"]),
                difficulty=str(_pick(data, "difficulty", default="L1")),
                knowledge_point_id=str(_pick(data, "knowledgePointId", "knowledge_point_id", default="")),
            )
        except (KeyError, TypeError, ValueError) as e:
            if isinstance(e, QuestionFormatError):
                raise
            raise QuestionFormatError(f"Câu hỏi sai định dạng: {e!r} trong {data!r}") from e

    def to_dict(self) -> Dict[str, Any]:
        return {
            "qid": self.qid,
            "text": self.text,
            "options": list(self.options),
            "correctIndex": self.correct_index,
            "chapter": self.chapter,
            "difficulty": self.difficulty,
            "knowledgePointId": self.knowledge_point_id,
        }


def knowledge_point_from_qid(qid: str) -> str:
    """'1-4-001' -> '1-4'. qid không có '-' thì trả lại chính nó."""
    return qid.rsplit("-", 1)[0] if "-" in qid else qid


# ============================
# Phiên làm bài
# ============================

@dataclass
class Answer:
    """Ô trả lời cho một câu trong đề; selected_option_index = None khi chưa chọn."""
    qid: str
    question_index: int
    correct_option_index: int
    selected_option_index: Optional[int] = None
    is_correct: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Answer":
        return cls(**data)


@dataclass
class Test:
    """Một đề đang làm hoặc đã nộp."""
    __test__ = False

    id: str
    questions: List[Question]
    answers: List[Answer]
    start_time: str
    current_question_index: int = 0
    end_time: Optional[str] = None
    completed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "questions": [q.to_dict() for q in self.questions],
            "answers": [asdict(a) for a in self.answers],
            "start_time": self.start_time,
            "current_question_index": self.current_question_index,
            "end_time": self.end_time,
            "completed": self.completed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Test":
        return cls(
            id=data["id"],
            questions=[Question.from_dict(q) for q in data["questions"]],
            answers=[Answer.from_dict(a) for a in data["answers"]],
            start_time=data["start_time"],
            current_question_index=data.get("current_question_index", 0),
            end_time=data.get("end_time"),
            completed=data.get("completed", False),
        )


@dataclass
class TestResult:
    __test__ = False

    id: str
    timestamp: str
    score: int
    total: int
    percentage: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TestResult":
        return cls(**data)


@dataclass
class WrongAnswerTemp:
    """Câu sai trong lần nộp bài hiện tại, trước khi gộp vào sổ câu sai."""
    qid: str
    timestamp: str
    question: Question
    user_option_index: int


@dataclass
class WrongAnswer:
    """Bản ghi trong sổ câu sai: timestamp là lần sai gần nhất."""
    qid: str
    timestamp: str
    question: Question
    wrong_count: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "qid": self.qid,
            "timestamp": self.timestamp,
            "question": self.question.to_dict(),
            "wrong_count": self.wrong_count,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WrongAnswer":
        return cls(
            qid=data["qid"],
            timestamp=data["timestamp"],
            question=Question.from_dict(data["question"]),
            wrong_count=int(data.get("wrong_count", 1)),
        )


@dataclass
class UserStats:
    total_tests: int = 0
    total_questions: int = 0
    correct_answers: int = 0
    wrong_answers: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserStats":
        return cls(**data)


# ============================
# Nhật ký sinh đề
# ============================

@dataclass
class ChapterStat:
    """actual: số câu thực tế; theoretical: số câu lý thuyết (w% * N); percentage: tỉ trọng chính thức."""
    actual: int
    theoretical: float
    percentage: str


@dataclass
class GenerationLog:
    requested: int
    total: int = 0
    chapter_distribution: Dict[str, ChapterStat] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
