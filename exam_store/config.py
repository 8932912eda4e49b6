# exam_store/config.py

import os
import logging
from dotenv import load_dotenv

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
env_path = os.path.join(BASE_DIR, ".env")
load_dotenv(dotenv_path=env_path)

EXAM_DB_PATH = os.getenv("EXAM_DB_PATH", "exam_prep.db")
QUESTION_BANK_PATH = os.getenv("QUESTION_BANK_PATH", os.path.join("data", "questionBank.json"))
WRONG_ANSWERS_EXPORT = os.getenv("WRONG_ANSWERS_EXPORT", "wrong_answers.json")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

try:
    DEFAULT_TEST_SIZE = int(os.getenv("DEFAULT_TEST_SIZE", "10"))
except ValueError:
    DEFAULT_TEST_SIZE = 10

# Chỉ giữ N kết quả gần nhất
RESULTS_KEEP = 3

LOG_FORMAT = "[%(asctime)s] %(levelname)s - %(message)s"


def setup_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
