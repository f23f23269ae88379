"""Configuration for the test fixture converter.

Two layers are kept apart:

- ``Settings`` reads the process environment (and an optional ``.env`` file)
  for the variables the runner has always honoured.
- ``BatchConfig`` is the explicit value handed to the batch coordinator. It is
  built once by the command line from flags and ``Settings`` so nothing below
  the CLI touches ambient process state.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConversionMode(str, Enum):
    """Direction of conversion requested for a batch."""

    TO_EXTERNAL = "to_external"  # .neadic -> .aff/.dic/.good/.wrong
    TO_INTERNAL = "to_internal"  # .aff/.dic/.good/.wrong -> .neadic
    NONE = "none"


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class Settings(BaseSettings):
    """Environment-derived defaults for the command line."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    ext_test_dir: str | None = None
    int_test_dir: str | None = None
    int_test_cmd: str | None = None
    ext_test_cmd: str | None = None

    @field_validator("ext_test_dir", "int_test_dir", "int_test_cmd", "ext_test_cmd")
    @classmethod
    def strip_blank(cls, v: str | None) -> str | None:
        """Treat empty or whitespace-only values as unset."""
        return _blank_to_none(v)


@lru_cache
def get_settings() -> Settings:
    """Return the cached Settings instance."""
    return Settings()


class BatchConfig(BaseModel):
    """Everything the batch coordinator needs to process a list of test cases."""

    mode: ConversionMode = ConversionMode.NONE
    internal_test_command: str | None = None
    external_test_command: str | None = None
    external_dir: Path = Path()
    internal_dir: Path = Path()
    strict: bool = False

    @field_validator("internal_test_command", "external_test_command")
    @classmethod
    def strip_blank_command(cls, v: str | None) -> str | None:
        return _blank_to_none(v)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        mode: ConversionMode = ConversionMode.NONE,
        internal_test_command: str | None = None,
        external_test_command: str | None = None,
        external_dir: str | Path | None = None,
        internal_dir: str | Path | None = None,
        strict: bool = False,
    ) -> "BatchConfig":
        """Build a config where explicit arguments override the settings."""
        ext_dir = external_dir if external_dir is not None else settings.ext_test_dir
        int_dir = internal_dir if internal_dir is not None else settings.int_test_dir
        return cls(
            mode=mode,
            internal_test_command=internal_test_command or settings.int_test_cmd,
            external_test_command=external_test_command or settings.ext_test_cmd,
            external_dir=Path(ext_dir) if ext_dir else Path(),
            internal_dir=Path(int_dir) if int_dir else Path(),
            strict=strict,
        )
