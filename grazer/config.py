from typing import Set

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Extensions routed to the TypeScript grammar.
TYPESCRIPT_EXTENSIONS: Set[str] = {'.ts', '.mts', '.cts'}

# Plain JavaScript goes through the TSX grammar as well so that JSX parses.
TSX_EXTENSIONS: Set[str] = {'.tsx', '.js', '.jsx', '.mjs', '.cjs'}

# Files that use `#` line comments (and no block comments) for text metrics.
HASH_COMMENT_EXTENSIONS: Set[str] = {
    '.py', '.sh', '.bash', '.zsh', '.rb', '.pl',
    '.yaml', '.yml', '.toml', '.ini', '.cfg', '.r',
}

# Only skipped when vendored directories are excluded (see Settings).
IGNORE_DIRS: Set[str] = {
    '.git',
    'node_modules',
    'venv',
    '.venv',
    '__pycache__',
    'dist',
    'build',
    '.next',
    'coverage',
    '.idea',
    '.vscode',
    'target',
    'out',
}

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000
DEFAULT_LOG_LEVEL = "INFO"


class Settings(BaseSettings):
    """
    Runtime settings, read from GRAZER_* environment variables.

    Command line flags are applied on top by the CLI with `model_copy`.
    """

    model_config = SettingsConfigDict(
        env_prefix="GRAZER_",
        extra="ignore",
        frozen=True,
    )

    host: str = Field(default=DEFAULT_HOST, description="Interface the HTTP server binds to.")
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535, description="Port of the HTTP server.")
    log_level: str = Field(default=DEFAULT_LOG_LEVEL, description="Logging level written to stderr.")
    skip_vendored: bool = Field(
        default=False,
        description="Leave vendored and build directories (IGNORE_DIRS) out of directory scans.",
    )

    @field_validator("log_level", mode="after")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @classmethod
    def from_env(cls) -> "Settings":
        return cls()
