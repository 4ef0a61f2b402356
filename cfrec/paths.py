from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ProjectPaths:
    data_dir: Path
    users_csv: Path
    movies_csv: Path
    ratings_csv: Path

    @classmethod
    def from_repo_root(cls, repo_root: Path, *, data_dir: Path | str = "data/raw") -> "ProjectPaths":
        p_path = Path(data_dir) if isinstance(data_dir, str) else data_dir
        if not p_path.is_absolute():
            p_path = repo_root / p_path
        return cls.from_data_dir(p_path)

    @classmethod
    def from_data_dir(cls, data_dir: Path | str) -> "ProjectPaths":
        data_dir_p = Path(data_dir).resolve()
        return cls(
            data_dir=data_dir_p,
            users_csv=data_dir_p / "users.csv",
            movies_csv=data_dir_p / "movies.csv",
            ratings_csv=data_dir_p / "ratings.csv",
        )


def resolve_path(repo_root: Path, path: Path | str) -> Path:
    p = Path(path)
    if p.is_absolute():
        return p
    return (repo_root / p).resolve()


def get_repo_root() -> Path:
    """Return repo root by searching upwards for `config.yaml` or `.git`."""
    start = Path.cwd().resolve()
    if start.is_file():
        start = start.parent

    for candidate in (start, *start.parents):
        if (candidate / "config.yaml").is_file() or (candidate / ".git").exists():
            return candidate

    # Fallback: search upwards from this file (useful if called from elsewhere).
    start = Path(__file__).resolve().parent
    for candidate in (start, *start.parents):
        if (candidate / "config.yaml").is_file() or (candidate / ".git").exists():
            return candidate

    raise FileNotFoundError("Could not locate repo root (expected `config.yaml` or `.git`).")
