"""
세레모니 설정
=============

환경 변수(POTAU_*)로 기본값을 덮어쓸 수 있다.

  POTAU_WORKERS             업데이트 병렬 워커 수 (기본: CPU 수)
  POTAU_PARALLEL_THRESHOLD  병렬화를 시작하는 최소 원소 수 (기본: 256)
  POTAU_WNAF_WINDOW         wNAF 윈도우 크기 (기본: 3)
  POTAU_SUBGROUP_CHECK      "full" 또는 "partial" (기본: partial)
  POTAU_LOG_LEVEL           로그 레벨 (기본: INFO)
  POTAU_LOG_FILE            로그 파일 경로 (기본: 없음, 콘솔만)
  POTAU_DB_PATH             TinyDB 파일 경로 (기본: db.json)
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from potau.scalar_mul import DEFAULT_WINDOW
from potau.point_encoding import SubgroupCheck


@dataclass
class CeremonyConfig:
    workers: int = field(default_factory=lambda: os.cpu_count() or 1)
    parallel_threshold: int = 256
    wnaf_window: int = DEFAULT_WINDOW
    subgroup_check: SubgroupCheck = SubgroupCheck.PARTIAL
    log_level: str = "INFO"
    log_file: Optional[str] = None
    db_path: str = "db.json"

    def __post_init__(self):
        if self.workers < 1:
            raise ValueError(f"workers는 1 이상이어야 합니다: {self.workers}")
        if self.wnaf_window < 2:
            raise ValueError(f"wnaf_window는 2 이상이어야 합니다: {self.wnaf_window}")
        if isinstance(self.subgroup_check, str):
            self.subgroup_check = SubgroupCheck.parse(self.subgroup_check)


def load_config(environ=None) -> CeremonyConfig:
    """환경 변수에서 설정을 읽는다. 없는 값은 기본값을 사용한다."""
    if environ is None:
        environ = os.environ

    overrides = {}
    if "POTAU_WORKERS" in environ:
        overrides["workers"] = int(environ["POTAU_WORKERS"])
    if "POTAU_PARALLEL_THRESHOLD" in environ:
        overrides["parallel_threshold"] = int(environ["POTAU_PARALLEL_THRESHOLD"])
    if "POTAU_WNAF_WINDOW" in environ:
        overrides["wnaf_window"] = int(environ["POTAU_WNAF_WINDOW"])
    if "POTAU_SUBGROUP_CHECK" in environ:
        overrides["subgroup_check"] = environ["POTAU_SUBGROUP_CHECK"]
    if "POTAU_LOG_LEVEL" in environ:
        overrides["log_level"] = environ["POTAU_LOG_LEVEL"]
    if "POTAU_LOG_FILE" in environ:
        overrides["log_file"] = environ["POTAU_LOG_FILE"]
    if "POTAU_DB_PATH" in environ:
        overrides["db_path"] = environ["POTAU_DB_PATH"]
    return CeremonyConfig(**overrides)
