from typing import List

from rich.console import Console
from rich.table import Table

from exam_core.chapter_weights import chapter_label
from exam_core.schema import WrongAnswer
from exam_store.config import EXAM_DB_PATH, WRONG_ANSWERS_EXPORT, setup_logging
from exam_store.exporter import export_wrong_answers_json
from exam_store.storage import ExamStorage

console = Console()

SORT_KEYS = ("time", "count", "chapter")


def _chapter_no(chapter: str) -> int:
    digits = "".join(c for c in chapter if c.isdigit())
    return int(digits) if digits else 10 ** 6


def sort_wrong_answers(wrong: List[WrongAnswer], sort_by: str = "time") -> List[WrongAnswer]:
    """
    Sắp xếp sổ câu sai:
    - time: lần sai gần nhất trước
    - count: số lần sai giảm dần
    - chapter: theo chương rồi knowledge point
    """
    if sort_by == "time":
        return sorted(wrong, key=lambda w: w.timestamp, reverse=True)
    if sort_by == "count":
        return sorted(wrong, key=lambda w: w.wrong_count, reverse=True)
    if sort_by == "chapter":
        return sorted(wrong, key=lambda w: (_chapter_no(w.question.chapter), w.question.chapter,
                                            w.question.knowledge_point_id))
    raise ValueError(f"sort_by phải là một trong {SORT_KEYS}, nhận {sort_by!r}")


def show_wrong_answers(db_path: str = EXAM_DB_PATH, sort_by: str = "time"):
    wrong = ExamStorage(db_path).get_wrong_answers()
    if not wrong:
        console.print("[green]Chưa có câu sai nào.[/green]")
        return

    wrong = sort_wrong_answers(wrong, sort_by)
    table = Table(title=f"Sổ câu sai ({len(wrong)} câu, sắp theo {sort_by})")
    table.add_column("qid")
    table.add_column("Chương")
    table.add_column("Số lần sai", justify="right")
    table.add_column("Lần sai gần nhất")
    table.add_column("Đáp án đúng")
    for w in wrong:
        q = w.question
        table.add_row(q.qid, chapter_label(q.chapter), str(w.wrong_count), w.timestamp, q.options[q.correct_index])
    console.print(table)


def remove_wrong_answer(qid: str, db_path: str = EXAM_DB_PATH) -> bool:
    removed = ExamStorage(db_path).remove_wrong_answer(qid)
    if removed:
        console.print(f"[green]✅ Đã xoá câu {qid} khỏi sổ câu sai.[/green]")
    else:
        console.print(f"[yellow]Không tìm thấy câu {qid} trong sổ câu sai.[/yellow]")
    return removed


def export_wrong_answers(db_path: str = EXAM_DB_PATH, out_path: str = WRONG_ANSWERS_EXPORT):
    wrong = ExamStorage(db_path).get_wrong_answers()
    if not wrong:
        console.print("[yellow]Không có câu sai để xuất.[/yellow]")
        return None
    path = export_wrong_answers_json(wrong, out_path)
    console.print(f"[green]✅ Đã xuất sổ câu sai: {path}[/green]")
    return path


if __name__ == "__main__":
    setup_logging()
    show_wrong_answers()
