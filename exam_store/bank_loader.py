# exam_store/bank_loader.py

import os
import json
import logging
from typing import Any, Dict, List

from tqdm import tqdm

from exam_core.schema import Question, QuestionFormatError

logger = logging.getLogger(__name__)


class QuestionBankError(Exception):
    """Không đọc được ngân hàng câu hỏi."""


def _read_entries(path: str) -> List[Dict[str, Any]]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise QuestionBankError(f"File {path} không phải JSON hợp lệ: {e}") from e
    if not isinstance(data, list):
        raise QuestionBankError(f"File {path} phải chứa danh sách câu hỏi, nhận {type(data).__name__}")
    return data


def _bank_files(path: str) -> List[str]:
    if os.path.isfile(path):
        return [path]
    files = []
    for root, _, names in os.walk(path):
        for name in sorted(names):
            if name.endswith(".json"):
                files.append(os.path.join(root, name))
    return sorted(files)


def load_question_bank(path: str, show_progress: bool = False) -> List[Question]:
    """
    Đọc ngân hàng câu hỏi từ một file JSON hoặc cả thư mục (*.json, đệ quy).
    Câu sai định dạng bị bỏ qua và ghi log cảnh báo.
    """
    if not os.path.exists(path):
        raise QuestionBankError(f"Không tìm thấy ngân hàng câu hỏi: {path}")

    entries: List[Dict[str, Any]] = []
    for file_path in _bank_files(path):
        loaded = _read_entries(file_path)
        entries.extend(loaded)
        logger.info(f"Loaded {len(loaded)} entries from {file_path}")

    bank: List[Question] = []
    skipped = 0
    for entry in tqdm(entries, desc="Đang kiểm tra ngân hàng câu hỏi", ncols=80, disable=not show_progress):
        if not isinstance(entry, dict):
            skipped += 1
            logger.warning(f"Bỏ qua mục không phải object: {entry!r}")
            continue
        try:
            bank.append(Question.from_dict(entry))
        except QuestionFormatError as e:
            skipped += 1
            logger.warning(f"Bỏ qua câu hỏi lỗi: {e}")

    if skipped:
        logger.warning(f"Đã bỏ qua {skipped} câu hỏi sai định dạng")
    logger.info(f"Ngân hàng có {len(bank)} câu hỏi hợp lệ")
    return bank
