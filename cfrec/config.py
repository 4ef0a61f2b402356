"""YAML configuration with environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .paths import ProjectPaths, resolve_path
from .similarity.metrics import SimilarityMetric


@dataclass(frozen=True)
class AppConfig:
    data_dir: Path
    default_similarity: SimilarityMetric = SimilarityMetric.EUCLIDEAN
    default_results: int = 10
    max_results: int = 1000
    log_level: str = "INFO"


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")
    obj = yaml.safe_load(path.read_text())
    if obj is None:
        return {}
    if not isinstance(obj, dict):
        raise ValueError(f"Expected YAML mapping at {path}, got {type(obj)}")
    return obj


def _section(cfg: dict[str, Any], name: str) -> dict[str, Any]:
    value = cfg.get(name, {})
    return value if isinstance(value, dict) else {}


def load_config(path: Path, *, repo_root: Path | None = None) -> AppConfig:
    """Read `config.yaml`; `DATA_DIR` and `LOG_LEVEL` env vars win over the file.

    Relative data paths resolve against `repo_root` (defaults to the config's directory).
    """
    path = Path(path).resolve()
    root = Path(repo_root).resolve() if repo_root is not None else path.parent
    cfg = _load_yaml(path)

    dataset_cfg = _section(cfg, "dataset")
    service_cfg = _section(cfg, "service")
    logging_cfg = _section(cfg, "logging")

    data_dir_raw = os.getenv("DATA_DIR") or str(dataset_cfg.get("data_dir", "data/raw"))
    paths = ProjectPaths.from_repo_root(root, data_dir=resolve_path(root, data_dir_raw))

    default_results = int(service_cfg.get("default_results", 10))
    max_results = int(service_cfg.get("max_results", 1000))
    if default_results < 0 or max_results < 0:
        raise ValueError("config.yaml service.default_results/max_results must be non-negative")
    if default_results > max_results:
        raise ValueError("config.yaml service.default_results must not exceed service.max_results")

    return AppConfig(
        data_dir=paths.data_dir,
        default_similarity=SimilarityMetric.parse(str(service_cfg.get("default_similarity", "EUCLIDEAN"))),
        default_results=default_results,
        max_results=max_results,
        log_level=str(os.getenv("LOG_LEVEL") or logging_cfg.get("level", "INFO")),
    )
