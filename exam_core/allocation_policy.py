# exam_core/allocation_policy.py

from __future__ import annotations

import logging
import math
from typing import Dict, Iterable, List, Mapping, Tuple

from .chapter_weights import (
    CHAPTER_WEIGHTS,
    SMALL_SAMPLE_THRESHOLD,
    TIER_1,
    TIER_2,
    TIER_3,
    chapters_by_weight,
)
from .schema import Question

logger = logging.getLogger(__name__)


class InvalidTestSizeError(ValueError):
    """Số câu yêu cầu không hợp lệ (âm hoặc không phải số nguyên)."""

    def __init__(self, requested):
        super().__init__(f"Số câu yêu cầu phải là số nguyên >= 0, nhận được {requested!r}")
        self.requested = requested


# ============================
# Các hàm tiện ích
# ============================

def _clip_nonneg(x: float) -> int:
    """Làm tròn xuống và không âm."""
    return max(0, int(math.floor(x)))


def _round_half_up(x: float) -> int:
    return max(0, int(math.floor(x + 0.5)))


def check_test_size(total) -> int:
    if isinstance(total, bool) or not isinstance(total, int) or total < 0:
        raise InvalidTestSizeError(total)
    return total


def theoretical_count(chapter: str, total: int) -> float:
    """Số câu lý thuyết = tỉ trọng% * N (có thể lẻ)."""
    return CHAPTER_WEIGHTS.get(chapter, 0) * total / 100.0


# ============================
# Chapter census
# ============================

def count_by_chapter(bank: Iterable[Question]) -> Dict[str, int]:
    """
    Đếm số câu khả dụng theo chương.
    Chương có trong bảng tỉ trọng nhưng vắng trong ngân hàng vẫn có mặt với giá trị 0.
    """
    counts: Dict[str, int] = {ch: 0 for ch in CHAPTER_WEIGHTS}
    for q in bank or ():
        counts[q.chapter] = counts.get(q.chapter, 0) + 1
    return counts


# ============================
# Allocation planner
# ============================

def _take(chapter: str, target: int, available: int, warnings: List[str]) -> int:
    """Cắt chỉ tiêu theo số câu có sẵn, ghi cảnh báo khi thiếu."""
    if available <= 0:
        warnings.append(f"{chapter}: không có câu hỏi khả dụng, phân bổ 0 câu")
        return 0
    if available < target:
        warnings.append(f"{chapter}: chỉ có {available} câu, thiếu {target - available} câu so với chỉ tiêu {target}")
        return available
    return target


def _allocate_standard(census: Mapping[str, int], total: int, warnings: List[str]) -> Dict[str, int]:
    """N >= 50: mỗi chương lấy floor(w% * N), thiếu thì lấy hết phần có sẵn."""
    allocation: Dict[str, int] = {}
    for chapter in CHAPTER_WEIGHTS:
        theo = theoretical_count(chapter, total)
        available = census.get(chapter, 0)
        if available >= theo:
            allocation[chapter] = _clip_nonneg(theo)
        elif available > 0:
            allocation[chapter] = available
            warnings.append(f"{chapter}: chỉ có {available} câu, ít hơn số câu lý thuyết {theo:.2f}")
        else:
            allocation[chapter] = 0
            warnings.append(f"{chapter}: không có câu hỏi khả dụng, phân bổ 0 câu")
    return allocation


def _allocate_small_sample(census: Mapping[str, int], total: int, warnings: List[str]) -> Dict[str, int]:
    """
    N < 50: bảo vệ các chương quan trọng bằng sàn theo tier.
    - Tier 1: ít nhất 1 câu nếu chương còn câu
    - Tier 2: floor(w% * N)
    - Tier 3: chia phần còn lại theo tỉ lệ lý thuyết trong nhóm
    """
    allocation: Dict[str, int] = {}

    for chapter in TIER_1:
        target = max(1, _clip_nonneg(theoretical_count(chapter, total)))
        allocation[chapter] = _take(chapter, target, census.get(chapter, 0), warnings)

    for chapter in TIER_2:
        target = _clip_nonneg(theoretical_count(chapter, total))
        allocation[chapter] = _take(chapter, target, census.get(chapter, 0), warnings)

    remainder = total - sum(allocation.values())
    if remainder <= 0:
        for chapter in TIER_3:
            allocation[chapter] = 0
        warnings.append(f"Tier 1-2 đã dùng hết {total} câu, các chương Tier 3 không được phân bổ")
        return allocation

    # tỉ lệ lý thuyết trong nhóm chỉ phụ thuộc tỉ trọng
    tier3_weight = sum(CHAPTER_WEIGHTS[ch] for ch in TIER_3)
    for chapter in TIER_3:
        share = remainder * CHAPTER_WEIGHTS[chapter] / tier3_weight if tier3_weight > 0 else 0.0
        allocation[chapter] = _take(chapter, _round_half_up(share), census.get(chapter, 0), warnings)

    return allocation


def _reconcile(allocation: Dict[str, int], census: Mapping[str, int], total: int) -> int:
    """
    Đưa tổng phân bổ về đúng N. Trả về phần chênh còn lại (0 nếu cân bằng được).
    - Thiếu: quét theo tỉ trọng giảm dần, mỗi lượt +1 câu cho chương còn dư câu
    - Thừa: quét theo tỉ trọng tăng dần, mỗi lượt -1 câu cho chương đang > 0
    Mỗi lượt chỉ dịch 1 câu/chương: dồn cả phần chênh vào một lần quét sẽ đẩy hết
    sai số làm tròn vào một chương (N=99 cho 第3章 19%), không gộp lại thành một lượt.
    """
    diff = total - sum(allocation.values())

    if diff > 0:
        order = chapters_by_weight(descending=True)
        while diff > 0:
            moved = False
            for chapter in order:
                if diff == 0:
                    break
                if census.get(chapter, 0) - allocation[chapter] > 0:
                    allocation[chapter] += 1
                    diff -= 1
                    moved = True
            if not moved:
                break

    elif diff < 0:
        order = chapters_by_weight(descending=False)
        while diff < 0:
            moved = False
            for chapter in order:
                if diff == 0:
                    break
                if allocation[chapter] > 0:
                    allocation[chapter] -= 1
                    diff += 1
                    moved = True
            if not moved:
                break

    return diff


def plan_allocation(census: Mapping[str, int], total: int) -> Tuple[Dict[str, int], List[str]]:
    """
    Tính số câu cần rút từ mỗi chương.

    Trả về (allocation, warnings):
        allocation: {chương: số câu}, đủ 17 chương trong bảng tỉ trọng
        warnings: cảnh báo thiếu câu / không cân bằng được

    Tổng allocation = N nếu ngân hàng đủ câu, ngược lại là mức tối đa đạt được.
    Thiếu câu không phải lỗi; chỉ N âm mới raise InvalidTestSizeError.
    """
    check_test_size(total)
    warnings: List[str] = []

    if total == 0:
        return {ch: 0 for ch in CHAPTER_WEIGHTS}, warnings

    if sum(census.get(ch, 0) for ch in CHAPTER_WEIGHTS) == 0:
        warnings.append("Không chương nào trong đề cương có câu hỏi khả dụng")
        return {ch: 0 for ch in CHAPTER_WEIGHTS}, warnings

    if total >= SMALL_SAMPLE_THRESHOLD:
        allocation = _allocate_standard(census, total, warnings)
    else:
        allocation = _allocate_small_sample(census, total, warnings)

    diff = _reconcile(allocation, census, total)
    if diff != 0:
        warnings.append(f"Không thể cân bằng số câu: còn {diff} câu chưa phân bổ được theo chương")

    logger.debug(f"Phân bổ theo chương (N={total}): {allocation}")
    return allocation, warnings


# ============================
# Kiểm tra độ lệch (chỉ chẩn đoán)
# ============================

def max_deviation_percent(total: int) -> float:
    return max(2.0, 100.0 / total) if total > 0 else 0.0


def validate_deviation(allocation: Mapping[str, int], total: int) -> List[str]:
    """
    So sánh tỉ lệ thực tế với tỉ trọng chính thức. Không sửa allocation.
    Cảnh báo khi |actual% - theoretical%| > max(2, 100/N) hoặc actual > 1.5 * lý thuyết.
    """
    warnings: List[str] = []
    if total <= 0:
        return warnings

    limit = max_deviation_percent(total)
    for chapter, weight in CHAPTER_WEIGHTS.items():
        theo = theoretical_count(chapter, total)
        if theo <= 0:
            continue
        actual = allocation.get(chapter, 0)
        actual_pct = actual * 100.0 / total
        if abs(actual_pct - weight) > limit:
            warnings.append(
                f"{chapter}: tỉ lệ thực tế {actual_pct:.1f}% lệch {abs(actual_pct - weight):.1f}% "
                f"so với {weight}% (ngưỡng {limit:.1f}%)"
            )
        if actual > 1.5 * theo:
            warnings.append(f"{chapter}: {actual} câu vượt 1.5 lần số câu lý thuyết {theo:.2f}")
    return warnings
