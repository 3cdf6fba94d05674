from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, List

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode

# Load the repository root .env whatever the working directory is.
ROOT_DIR = Path(__file__).resolve().parents[1]
load_dotenv(ROOT_DIR / ".env")

PROCESSING_MODES = ("lossless", "auto")


class Settings(BaseSettings):
  default_processing_mode: str = Field(default="lossless", alias="DEFAULT_PROCESSING_MODE")
  max_upload_bytes: int = Field(default=100_000_000, gt=0, alias="MAX_UPLOAD_BYTES")
  page_workers: int = Field(default=1, alias="PAGE_WORKERS")
  structured_logs: bool = Field(default=True, alias="LOG_STRUCTURED")
  cors_allow_origins: Annotated[List[str], NoDecode] = Field(
    default_factory=lambda: ["*"], alias="CORS_ALLOW_ORIGINS"
  )

  @field_validator("default_processing_mode", mode="before")
  @classmethod
  def _known_mode(cls, value: Any) -> str:
    mode = str(value or "").strip().lower()
    if mode not in PROCESSING_MODES:
      raise ValueError(f"DEFAULT_PROCESSING_MODE must be one of {', '.join(PROCESSING_MODES)}")
    return mode

  @field_validator("cors_allow_origins", mode="before")
  @classmethod
  def _split_origins(cls, value: Any) -> Any:
    # Accept "https://a.example, https://b.example" from the environment.
    if isinstance(value, str):
      return [origin.strip() for origin in value.split(",") if origin.strip()]
    return value

  def effective_page_workers(self) -> int:
    return max(1, int(self.page_workers or 1))

  class Config:
    case_sensitive = False


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  return Settings()  # type: ignore[arg-type]
