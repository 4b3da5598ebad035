import logging

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_DB_PATH = ".data/japanese_srs.sqlite3"
DEFAULT_STATE_KEY = "app_state_v1"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    環境変数（および .env）から読み込まれる設定クラス。
    - state_db_path: 学習状態を保存する SQLite ファイル
    - practice_queue_limit / mixed_queue_limit: 練習モードの既定出題数
    """

    environment: str = Field(
        default="development",
        description="Runtime environment / 実行環境",
    )

    # --- 学習状態の永続化 ---
    state_db_path: str = Field(
        default=DEFAULT_DB_PATH,
        description="Path to SQLite database holding the app state / 学習状態を保存する SQLite DB パス",
    )
    state_key: str = Field(
        default=DEFAULT_STATE_KEY,
        description="Key of the state blob in the kv table / kv テーブル上の状態キー",
    )

    # --- 出題数 ---
    practice_queue_limit: int = Field(
        default=20,
        description="Default size of a practice queue / 練習キューの既定件数",
    )
    mixed_queue_limit: int = Field(
        default=20,
        description="Default size of a shuffled verb-form queue / 活用ミックス練習の既定件数",
    )

    # --- Logging ---
    log_level: str = Field(
        default="INFO",
        description="Root log level (DEBUG/INFO/WARNING/ERROR) / ログレベル",
    )

    # --- Strict mode ---
    strict_mode: bool = Field(
        default=True,
        description="Fail fast on invalid configuration (disable only for tests)",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: object) -> str:
        text = str(value or "").strip().upper()
        if text not in logging.getLevelNamesMapping():
            raise ValueError(f"LOG_LEVEL must be a logging level name, got {value!r}")
        return text

    @model_validator(mode="after")
    def _check_queue_limits(self) -> "Settings":
        # strict_mode では不正値で即座に失敗させ、非 strict では 1 件に丸める
        for name in ("practice_queue_limit", "mixed_queue_limit"):
            value = getattr(self, name)
            if value >= 1:
                continue
            if self.strict_mode:
                raise ValueError(f"{name.upper()} must be >= 1 when STRICT_MODE=true")
            setattr(self, name, 1)
        return self


settings = Settings()
