# exam_store/__init__.py

"""
Lớp lưu trữ và dữ liệu cho ứng dụng luyện thi:
- storage: SQLite key/value (đề đang làm, kết quả, sổ câu sai, thống kê)
- exporter: xuất sổ câu sai ra JSON
- bank_loader: đọc ngân hàng câu hỏi
- sample_bank: sinh ngân hàng mẫu
"""

from .storage import ExamStorage, StorageError, generate_test_id
from .exporter import export_wrong_answers_json
from .bank_loader import QuestionBankError, load_question_bank
from .sample_bank import generate_sample_bank, save_bank

__all__ = [
    "ExamStorage",
    "StorageError",
    "generate_test_id",
    "export_wrong_answers_json",
    "QuestionBankError",
    "load_question_bank",
    "generate_sample_bank",
    "save_bank",
]
