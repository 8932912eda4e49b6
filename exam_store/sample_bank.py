# exam_store/sample_bank.py

import os
import json
import random
from typing import Dict, List, Optional

from tqdm import tqdm

from exam_core.chapter_weights import CHAPTER_WEIGHTS, CHAPTER_TITLES
from exam_core.schema import Question

DIFFICULTIES = ["L1", "L2", "L3"]


def generate_sample_bank(
    per_chapter: int = 20,
    seed: int = 2025,
    chapters: Optional[Dict[str, int]] = None,
    show_progress: bool = False,
) -> List[Question]:
    """
    Sinh ngân hàng câu hỏi giả lập để demo / kiểm thử.
    - per_chapter: số câu mỗi chương (bị ghi đè bởi chapters nếu truyền vào)
    - chapters: {chương: số câu}, mặc định đủ 17 chương
    qid dạng "<số chương>-<knowledge point>-<seq>", ví dụ "3-2-007".
    """
    rng = random.Random(seed)
    plan = chapters if chapters is not None else {ch: per_chapter for ch in CHAPTER_WEIGHTS}

    bank: List[Question] = []
    for chapter, count in tqdm(plan.items(), desc="Sinh ngân hàng mẫu", ncols=80, disable=not show_progress):
        ch_no = "".join(c for c in chapter if c.isdigit()) or chapter
        title = CHAPTER_TITLES.get(chapter, chapter)
        for seq in range(1, count + 1):
            kp = f"{ch_no}-{(seq - 1) // 5 + 1}"
            options = [f"Phương án {letter}" for letter in "ABCD"]
            bank.append(Question(
                qid=f"{kp}-{seq:03d}",
                text=f"[{title}] Câu hỏi mẫu số {seq}",
                options=tuple(options),
                correct_index=rng.randrange(len(options)),
                chapter=chapter,
                difficulty=rng.choice(DIFFICULTIES),
                knowledge_point_id=kp,
            ))
    return bank


def save_bank(bank: List[Question], out_path: str) -> str:
    folder = os.path.dirname(out_path)
    if folder:
        os.makedirs(folder, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump([q.to_dict() for q in bank], f, ensure_ascii=False, indent=2)
    return out_path
