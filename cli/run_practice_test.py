import logging
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from exam_core.chapter_weights import chapter_label, tier_of
from exam_core.schema import GenerationLog, Question
from exam_core.session import ExamSession, SessionError
from exam_store.bank_loader import QuestionBankError, load_question_bank
from exam_store.config import DEFAULT_TEST_SIZE, EXAM_DB_PATH, QUESTION_BANK_PATH, setup_logging
from exam_store.storage import ExamStorage, StorageError

RESET = "\033[0m"
BOLD = "\033[1m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
CYAN = "\033[96m"
MAGENTA = "\033[95m"
BLUE = "\033[94m"

console = Console()


def load_bank(path: str = QUESTION_BANK_PATH) -> List[Question]:
    try:
        return load_question_bank(path, show_progress=True)
    except QuestionBankError as e:
        logging.error(f"Không đọc được ngân hàng câu hỏi: {e}")
        return []


def print_generation_log(log: GenerationLog):
    table = Table(title=f"Phân bổ đề: {log.total}/{log.requested} câu")
    table.add_column("Chương")
    table.add_column("Tier", justify="center")
    table.add_column("Thực tế", justify="right")
    table.add_column("Lý thuyết", justify="right")
    table.add_column("Tỉ trọng", justify="right")
    for chapter, stat in log.chapter_distribution.items():
        tier = tier_of(chapter)
        table.add_row(
            chapter_label(chapter),
            str(tier) if tier is not None else "-",
            str(stat.actual),
            f"{stat.theoretical:.2f}",
            stat.percentage,
        )
    console.print(table)
    for w in log.warnings:
        console.print(f"[yellow]⚠️ {w}[/yellow]")


def ask_test_size(max_available: int) -> int:
    raw = input(f"\nNhap so cau muon lam (Enter = {DEFAULT_TEST_SIZE}, max {max_available}): ").strip()
    if not raw:
        return DEFAULT_TEST_SIZE
    try:
        n = int(raw)
    except ValueError:
        print(f"{YELLOW}Gia tri khong hop le, dung mac dinh {DEFAULT_TEST_SIZE}.{RESET}")
        return DEFAULT_TEST_SIZE
    if n <= 0:
        return DEFAULT_TEST_SIZE
    return n


def ask_resume(session: ExamSession) -> bool:
    try:
        saved = session.store.get_current_test()
    except StorageError as e:
        logging.warning(f"Bài thi đang lưu bị hỏng, bỏ qua và tạo đề mới: {e}")
        session.store.clear_current_test()
        return False
    if saved is None or saved.completed:
        return False
    raw = input(f"{MAGENTA}Phat hien bai thi chua hoan thanh, tiep tuc? (y/N): {RESET}").strip().lower()
    if raw == "y":
        session.resume()
        return True
    session.store.clear_current_test()
    return False


def run_test_loop(session: ExamSession):
    while session.active_test is not None:
        q = session.current_question
        prog = session.progress
        print(f"\n{BLUE}Cau {prog['current']}/{prog['total']} ({chapter_label(q.chapter)} - {q.difficulty}):{RESET}")
        print(f"  {q.text}")
        for i, opt in enumerate(q.options, 1):
            marker = "*" if session.selected_answer == i - 1 else " "
            print(f"  {marker}{i}. {opt}")

        ans = input("Chon dap an (so), 'p' = cau truoc, 'q' = thoat va luu: ").strip().lower()
        if ans == "q":
            session.exit_test()
            print(f"{YELLOW}Da thoat, tien do duoc luu.{RESET}")
            return
        if ans == "p":
            session.go_to_previous()
            continue
        if ans == "" and session.selected_answer is not None:
            pass
        elif not ans.isdigit() or not (1 <= int(ans) <= len(q.options)):
            print(f"{YELLOW}Lua chon khong hop le.{RESET}")
            continue
        else:
            session.select_answer(int(ans) - 1)

        try:
            result = session.go_to_next()
        except SessionError as e:
            print(f"{YELLOW}{e}{RESET}")
            continue
        if result is not None:
            color = GREEN if result.percentage >= 60 else RED
            print(f"\n{BOLD}{CYAN}KET THUC BAI THI{RESET}")
            print(f"{color}Diem: {result.score}/{result.total} ({result.percentage}%){RESET}")


def run_practice_test(bank: Optional[List[Question]] = None, db_path: str = EXAM_DB_PATH):
    bank = bank if bank is not None else load_bank()
    if not bank:
        print(f"{RED}Khong tim thay du lieu cau hoi!{RESET}")
        return

    session = ExamSession(bank, ExamStorage(db_path))
    if not ask_resume(session):
        n = ask_test_size(len(bank))
        try:
            session.start_new_test(n)
        except SessionError as e:
            print(f"{RED}{e}{RESET}")
            return
        print_generation_log(session.last_log)
        if len(session.active_test.questions) < n:
            print(f"{YELLOW}Chi sinh duoc {len(session.active_test.questions)}/{n} cau.{RESET}")

    print(f"\n{BOLD}{CYAN}BAT DAU BAI THI{RESET}")
    run_test_loop(session)


if __name__ == "__main__":
    setup_logging()
    run_practice_test()
