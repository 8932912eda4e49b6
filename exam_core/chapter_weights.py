# exam_core/chapter_weights.py

"""
Bảng tỉ trọng chương theo đề cương CDGA chính thức.

- CHAPTER_WEIGHTS: chương -> % tỉ trọng (17 chương).
- PRIORITY_TIERS: nhóm ưu tiên theo độ lớn tỉ trọng, chỉ dùng khi đề ngắn.

Hằng số toàn tiến trình, không sửa lúc runtime.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple


CHAPTER_WEIGHTS: Mapping[str, int] = MappingProxyType({
    "第1章": 4,
    "第2章": 2,
    "第3章": 10,
    "第4章": 10,
    "第5章": 10,
    "第6章": 4,
    "第7章": 8,
    "第8章": 4,
    "第9章": 4,
    "第10章": 4,
    "第11章": 10,
    "第12章": 10,
    "第13章": 10,
    "第14章": 4,
    "第15章": 6,
    "第16章": 4,
    "第17章": 2,
})

CHAPTER_TITLES: Mapping[str, str] = MappingProxyType({
    "第1章": "数据管理知识体系概述",
    "第2章": "数据管理与商业价值",
    "第3章": "数据治理",
    "第4章": "数据架构",
    "第5章": "数据建模与设计",
    "第6章": "数据存储与操作",
    "第7章": "数据安全",
    "第8章": "数据集成与互操作性",
    "第9章": "文档与内容管理",
    "第10章": "参考与主数据",
    "第11章": "数据仓库与商务智能",
    "第12章": "元数据",
    "第13章": "数据质量",
    "第14章": "大数据与数据科学",
    "第15章": "数据管理组织",
    "第16章": "数据管理项目管理",
    "第17章": "数据管理与组织变革",
})

# Tier 1: >= 10%, Tier 2: 6-8%, Tier 3: <= 4%
TIER_1: Tuple[str, ...] = ("第3章", "第4章", "第5章", "第11章", "第12章", "第13章")
TIER_2: Tuple[str, ...] = ("第7章", "第15章")
TIER_3: Tuple[str, ...] = ("第1章", "第2章", "第6章", "第8章", "第9章", "第10章", "第14章", "第16章", "第17章")

PRIORITY_TIERS: Mapping[int, Tuple[str, ...]] = MappingProxyType({
    1: TIER_1,
    2: TIER_2,
    3: TIER_3,
})

# Dưới ngưỡng này dùng chế độ "small-sample" theo tier
SMALL_SAMPLE_THRESHOLD = 50


def chapters_by_weight(descending: bool = True) -> List[str]:
    """Danh sách chương sắp theo tỉ trọng; cùng tỉ trọng thì giữ thứ tự bảng."""
    return sorted(CHAPTER_WEIGHTS, key=lambda ch: CHAPTER_WEIGHTS[ch], reverse=descending)


def tier_of(chapter: str) -> Optional[int]:
    for tier, chapters in PRIORITY_TIERS.items():
        if chapter in chapters:
            return tier
    return None


def chapter_label(chapter: str) -> str:
    title = CHAPTER_TITLES.get(chapter)
    return f"{chapter} {title}" if title else chapter
