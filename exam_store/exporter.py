# exam_store/exporter.py

import os
import json
import logging
from typing import List

from exam_core.schema import WrongAnswer
from exam_store.config import WRONG_ANSWERS_EXPORT

logger = logging.getLogger(__name__)


def export_wrong_answers_json(wrong_answers: List[WrongAnswer], out_path: str = WRONG_ANSWERS_EXPORT) -> str:
    """Xuất sổ câu sai ra file JSON (UTF-8, indent=2). Trả về đường dẫn file."""
    folder = os.path.dirname(out_path)
    if folder:
        os.makedirs(folder, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump([w.to_dict() for w in wrong_answers], f, ensure_ascii=False, indent=2)
    logger.info(f"Đã xuất {len(wrong_answers)} câu sai ra {out_path}")
    return out_path
