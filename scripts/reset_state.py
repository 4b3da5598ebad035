#!/usr/bin/env python
"""学習状態を初期データで上書きするユーティリティ。"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import Optional, Sequence


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--db-path",
        default=os.environ.get("STATE_DB_PATH"),
        type=Path,
        help="対象の SQLite DB パス（既定: 設定値 STATE_DB_PATH）",
    )
    parser.add_argument(
        "--key",
        default=None,
        help="kv テーブル上の状態キー（既定: 設定値 STATE_KEY）",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    # 設定クラスは import 時点で環境変数を読むため、先に上書きしてから読み込む。
    if args.db_path:
        os.environ["STATE_DB_PATH"] = str(args.db_path)

    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root / "src"))

    from japanese_srs.logging import configure_logging
    from japanese_srs.store import StateStore

    configure_logging()
    store = StateStore(db_path=str(args.db_path) if args.db_path else None, key=args.key)
    state = store.reset()
    print(f"Reset {store.db_path}: {len(state.decks)} decks, {len(state.cards)} cards.")


if __name__ == "__main__":
    main()
