import argparse

from exam_store.config import QUESTION_BANK_PATH, setup_logging
from exam_store.sample_bank import generate_sample_bank, save_bank


def build_sample_bank(per_chapter: int = 20, seed: int = 42, out_path: str = QUESTION_BANK_PATH):
    print("🚀 Generating sample question bank...")
    bank = generate_sample_bank(per_chapter=per_chapter, seed=seed, show_progress=True)
    save_bank(bank, out_path)
    print(f"✅ Saved {len(bank)} questions to {out_path}")
    print("🎯 You can now run: python exam_demo.py")


if __name__ == "__main__":
    setup_logging()
    parser = argparse.ArgumentParser(description="Sinh ngân hàng câu hỏi mẫu cho 17 chương.")
    parser.add_argument("--per-chapter", type=int, default=20)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--out", default=QUESTION_BANK_PATH)
    args = parser.parse_args()
    build_sample_bank(args.per_chapter, args.seed, args.out)
