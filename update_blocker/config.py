from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()

DEFAULT_MARKER_FILES = (".git", ".svn", ".hg")


class BlockerSettings(BaseSettings):
    # Blocking settings
    all: bool = False
    core: bool = False
    files: tuple[str, ...] = DEFAULT_MARKER_FILES
    plugins: frozenset[str] = frozenset()
    themes: frozenset[str] = frozenset()

    # Repository settings
    api_host: str = "api.wordpress.org"

    # Logging settings
    log_level: str = "INFO"
    log_json: bool = False

    model_config = SettingsConfigDict(
        env_prefix="UPDATE_BLOCKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    @field_validator("files")
    @classmethod
    def marker_files_are_bare_names(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for name in value:
            if not name or "/" in name or "\\" in name or name in (".", ".."):
                raise ValueError(f"marker file must be a bare filename, got {name!r}")
        return value

    @field_validator("log_level")
    @classmethod
    def log_level_upper(cls, value: str) -> str:
        return value.upper()
