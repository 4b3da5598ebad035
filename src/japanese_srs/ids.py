"""ID 生成ユーティリティ。

デッキ・カードの ID は種別 prefix と UUID を組み合わせる。保存データ内で
種別が一目で分かるよう prefix は固定する。
"""

from __future__ import annotations

import uuid


def generate_deck_id() -> str:
    return f"deck_{uuid.uuid4().hex}"


def generate_card_id() -> str:
    return f"card_{uuid.uuid4().hex}"
