import sys

from exam_store.config import EXAM_DB_PATH, setup_logging
from exam_store.storage import ExamStorage

RESET = "\033[0m"
BOLD = "\033[1m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
CYAN = "\033[96m"
RED = "\033[91m"

SORT_CHOICES = {"1": "time", "2": "count", "3": "chapter"}


def show_stats():
    storage = ExamStorage(EXAM_DB_PATH)
    stats = storage.get_user_stats()
    print(f"\n{CYAN}Tong so bai: {stats.total_tests} | Tong so cau: {stats.total_questions} | "
          f"Dung: {stats.correct_answers} | Sai: {stats.wrong_answers}{RESET}")
    for r in storage.get_test_results():
        print(f"  - {r.timestamp}: {r.score}/{r.total} ({r.percentage}%)")


def main():
    setup_logging()
    print(f"\n{BOLD}{CYAN}CDGA EXAM PREP - CLI DEMO{RESET}")
    print("-" * 40)
    print("1. Lam bai thi thu")
    print("2. Xem so cau sai")
    print("3. Xuat so cau sai (JSON)")
    print("4. Thong ke ket qua")
    print("5. Xoa toan bo du lieu")
    print("6. Xoa mot cau khoi so cau sai")
    print("0. Thoat")
    print("-" * 40)
    choice = input("Chon chuc nang (0-6): ").strip()
    if choice == "1":
        from cli.run_practice_test import run_practice_test
        run_practice_test()
    elif choice == "2":
        from cli.review_wrong_answers import show_wrong_answers
        raw = input("Sap xep: 1 = moi nhat, 2 = sai nhieu nhat, 3 = theo chuong (Enter = 1): ").strip()
        show_wrong_answers(sort_by=SORT_CHOICES.get(raw, "time"))
    elif choice == "3":
        from cli.review_wrong_answers import export_wrong_answers
        export_wrong_answers()
    elif choice == "4":
        show_stats()
    elif choice == "5":
        confirm = input(f"{YELLOW}Xoa toan bo du lieu? (y/N): {RESET}").strip().lower()
        if confirm == "y":
            ExamStorage(EXAM_DB_PATH).clear_all_data()
            print(f"{GREEN}Da xoa du lieu.{RESET}")
    elif choice == "6":
        from cli.review_wrong_answers import remove_wrong_answer
        qid = input("Nhap qid can xoa: ").strip()
        if qid:
            remove_wrong_answer(qid)
    elif choice == "0":
        print(f"{GREEN}Tam biet!{RESET}")
        sys.exit(0)
    else:
        print(f"{YELLOW}Lua chon khong hop le, vui long nhap 0-6.{RESET}")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print(f"\n{RED}Da dung chuong trinh.{RESET}")
