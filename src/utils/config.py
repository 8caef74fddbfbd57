# src/utils/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(key)
    return v if v is not None and v != "" else default


@dataclass(frozen=True)
class ProjectPaths:
    root: Path
    reports_dir: Path
    rate_sheets_dir: Path


def get_project_root() -> Path:
    """
    Resolve repo root robustly.
    Assumes this file lives at: <root>/src/utils/config.py
    """
    return Path(__file__).resolve().parents[2]


def get_paths() -> ProjectPaths:
    root = get_project_root()
    reports_dir = root / "reports"
    return ProjectPaths(
        root=root,
        reports_dir=reports_dir,
        rate_sheets_dir=reports_dir / "rate_sheets",
    )


def get_currency() -> str:
    """
    ESTIMATOR_CURRENCY (default: KRW); label attached to every estimate.
    """
    return _env("ESTIMATOR_CURRENCY", "KRW") or "KRW"


@dataclass(frozen=True)
class AwsConfig:
    region: str
    s3_bucket: Optional[str]
    s3_prefix: str

    @property
    def enabled(self) -> bool:
        return self.s3_bucket is not None


def get_aws_config() -> AwsConfig:
    """
    Optional S3 publishing of batch outputs, configured via environment variables.

    Env:
      AWS_REGION (default: ap-northeast-2)
      S3_BUCKET  (optional)
      S3_PREFIX  (default: premium-estimator)
    """
    return AwsConfig(
        region=_env("AWS_REGION", "ap-northeast-2") or "ap-northeast-2",
        s3_bucket=_env("S3_BUCKET", None),
        s3_prefix=_env("S3_PREFIX", "premium-estimator") or "premium-estimator",
    )
