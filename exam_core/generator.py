# exam_core/generator.py

"""
Sinh đề luyện thi từ ngân hàng câu hỏi:
    census (đếm theo chương) -> planner (phân bổ) -> selector (rút câu + xáo)

Không giữ trạng thái giữa các lần gọi; chỉ phụ thuộc (bank, N) và nguồn ngẫu nhiên.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .allocation_policy import (
    check_test_size,
    count_by_chapter,
    plan_allocation,
    validate_deviation,
)
from .chapter_weights import CHAPTER_WEIGHTS
from .schema import ChapterStat, GenerationLog, Question

logger = logging.getLogger(__name__)


@dataclass
class GeneratedTest:
    questions: List[Question]
    log: GenerationLog


def dedupe_bank(bank: Iterable[Question]) -> List[Question]:
    """Bỏ câu trùng qid, giữ lần xuất hiện đầu tiên."""
    seen = set()
    unique: List[Question] = []
    for q in bank or ():
        if q.qid in seen:
            continue
        seen.add(q.qid)
        unique.append(q)
    return unique


def group_by_chapter(bank: Iterable[Question]) -> Dict[str, List[Question]]:
    pools: Dict[str, List[Question]] = {}
    for q in bank:
        pools.setdefault(q.chapter, []).append(q)
    return pools


def select_questions(
    pools: Mapping[str, Sequence[Question]],
    allocation: Mapping[str, int],
    total: int,
    bank: Sequence[Question],
    rng: random.Random,
) -> Tuple[List[Question], List[str]]:
    """
    Rút câu theo allocation rồi xáo toàn bộ.

    - Mỗi chương: hoán vị ngẫu nhiên pool, lấy min(allocation, len(pool)) câu đầu
    - Còn thiếu so với N: bù ngẫu nhiên từ các câu chưa chọn trong ngân hàng
    - Không câu nào xuất hiện hai lần (theo qid)
    """
    warnings: List[str] = []
    picked: List[Question] = []
    picked_ids = set()

    for chapter, need in allocation.items():
        if need <= 0:
            continue
        pool = [q for q in pools.get(chapter, ()) if q.qid not in picked_ids]
        if len(pool) < need:
            warnings.append(f"{chapter}: cần {need} câu nhưng chỉ rút được {len(pool)} câu")
        drawn = list(pool)
        rng.shuffle(drawn)
        for q in drawn[:need]:
            picked.append(q)
            picked_ids.add(q.qid)

    # bù thiếu
    if len(picked) < total:
        remain = [q for q in bank if q.qid not in picked_ids]
        backfill = min(total - len(picked), len(remain))
        if backfill > 0:
            extra = rng.sample(remain, backfill)
            picked.extend(extra)
            picked_ids.update(q.qid for q in extra)
            warnings.append(f"Đã bổ sung ngẫu nhiên {backfill} câu từ phần còn lại của ngân hàng để đủ số câu")

    if len(picked) < total:
        warnings.append(
            f"Ngân hàng chỉ có {len(bank)} câu khác nhau, không đủ {total} câu yêu cầu (sinh được {len(picked)} câu)"
        )

    rng.shuffle(picked)
    return picked, warnings


def _distribution(questions: Sequence[Question], total: int) -> Dict[str, ChapterStat]:
    counts = count_by_chapter(questions)
    return {
        chapter: ChapterStat(
            actual=counts.get(chapter, 0),
            theoretical=round(weight * total / 100.0, 2),
            percentage=f"{weight}%",
        )
        for chapter, weight in CHAPTER_WEIGHTS.items()
    }


def generate_test(
    bank: Optional[Iterable[Question]],
    requested_count: int,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
) -> GeneratedTest:
    """
    Sinh một đề gồm requested_count câu.

    Tham số:
        bank: ngân hàng câu hỏi (có thể rỗng)
        requested_count: N >= 0; N âm -> InvalidTestSizeError
        rng: nguồn ngẫu nhiên; nếu None thì tạo random.Random(seed)

    Đảm bảo:
        len(questions) == N khi ngân hàng có >= N câu khác nhau, ngược lại trả hết
        không trùng qid; log.chapter_distribution đủ 17 chương
    """
    check_test_size(requested_count)
    rng = rng or random.Random(seed)
    logger.info(f"Sinh đề: yêu cầu {requested_count} câu")

    log = GenerationLog(requested=requested_count)
    if requested_count == 0:
        log.chapter_distribution = _distribution([], 0)
        return GeneratedTest(questions=[], log=log)

    raw = list(bank or [])
    questions = dedupe_bank(raw)
    if len(questions) < len(raw):
        log.warnings.append(f"Bỏ qua {len(raw) - len(questions)} câu trùng qid trong ngân hàng")

    if not questions:
        log.warnings.append("Ngân hàng câu hỏi trống, không thể sinh đề")
        log.chapter_distribution = _distribution([], requested_count)
        for w in log.warnings:
            logger.warning(w)
        return GeneratedTest(questions=[], log=log)

    census = count_by_chapter(questions)
    allocation, plan_warnings = plan_allocation(census, requested_count)
    log.warnings.extend(plan_warnings)
    log.warnings.extend(validate_deviation(allocation, requested_count))

    selected, select_warnings = select_questions(
        group_by_chapter(questions), allocation, requested_count, questions, rng
    )
    log.warnings.extend(select_warnings)

    log.total = len(selected)
    log.chapter_distribution = _distribution(selected, requested_count)

    for w in log.warnings:
        logger.warning(w)
    logger.info(f"Sinh đề xong: {log.total}/{requested_count} câu, {len(log.warnings)} cảnh báo")
    logger.debug(f"Nhật ký phân bổ: {log.to_dict()}")

    return GeneratedTest(questions=selected, log=log)
