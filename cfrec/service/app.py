"""FastAPI service entrypoint for the collaborative-filtering recommender."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Callable, Optional

from fastapi import APIRouter, FastAPI, HTTPException, Request

from ..config import AppConfig, load_config
from ..errors import DatasetError, NoRatingsForTargetError, UnsupportedMetricError
from ..paths import get_repo_root
from ..similarity.metrics import SimilarityMetric
from ..utils import setup_logging
from .recommender import CollaborativeRecommender
from .schemas import (
    MovieRecommendRequest,
    MovieRecommendResponse,
    MoviesResponse,
    SimilaritiesResponse,
    TopMatchingUsersRequest,
    TopMatchingUsersResponse,
    UserRecommendRequest,
    UserRecommendResponse,
    UsersResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or str(raw).strip() == "":
        return default
    p = Path(str(raw))
    return p if p.is_absolute() else (get_repo_root() / p).resolve()


def _recommender(request: Request) -> CollaborativeRecommender:
    rec = getattr(request.app.state, "recommender", None)
    if rec is None:
        raise HTTPException(status_code=503, detail="Recommender not initialized")
    return rec


def _config(request: Request) -> AppConfig:
    cfg = getattr(request.app.state, "config", None)
    if cfg is None:
        raise HTTPException(status_code=503, detail="Config not initialized")
    return cfg


def _resolve_params(request: Request, similarity: Optional[str], results: Optional[int]) -> tuple[SimilarityMetric, int]:
    """Apply config defaults and reject unknown metrics or oversized `results` before any work happens."""
    cfg = _config(request)
    try:
        metric = SimilarityMetric.parse(similarity) if similarity is not None else cfg.default_similarity
    except UnsupportedMetricError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    if results is None:
        return metric, int(cfg.default_results)
    n = int(results)
    if n > int(cfg.max_results):
        raise HTTPException(status_code=422, detail=f"results must be at most {cfg.max_results}, got {n}")
    return metric, n


def _run(fn: Callable[..., Any], *args: Any) -> Any:
    try:
        return fn(*args)
    except DatasetError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except NoRatingsForTargetError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except UnsupportedMetricError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/users/all", response_model=UsersResponse)
def users_all(request: Request) -> dict:
    """Return every user in the catalog."""
    users = _run(_recommender(request).list_users)
    return {"results": [{"userId": u.userId, "name": u.name} for u in users]}


@router.post("/users/top-matching-users", response_model=TopMatchingUsersResponse)
def top_matching_users(req: TopMatchingUsersRequest, request: Request) -> dict:
    """Return the users whose ratings are most similar to the target user's."""
    metric, n = _resolve_params(request, req.similarity, req.results)
    users = _run(_recommender(request).top_matching_users, int(req.userId), metric, n)
    return {
        "userId": int(req.userId),
        "similarity": metric.value,
        "results": [u.__dict__ for u in users],
    }


@router.get("/movies/all", response_model=MoviesResponse)
def movies_all(request: Request) -> dict:
    """Return every movie in the catalog."""
    movies = _run(_recommender(request).list_movies)
    return {"results": [m.__dict__ for m in movies]}


@router.post("/movies/recommended-movies", response_model=UserRecommendResponse)
def recommended_movies(req: UserRecommendRequest, request: Request) -> dict:
    """User-based recommendations: unrated movies scored by similar users' ratings."""
    metric, n = _resolve_params(request, req.similarity, req.results)
    movies = _run(_recommender(request).recommended_movies, int(req.userId), metric, n)
    return {"userId": int(req.userId), "similarity": metric.value, "results": [m.__dict__ for m in movies]}


@router.post("/movies/item-based-recommended-movies", response_model=UserRecommendResponse)
def item_based_recommended_movies(req: UserRecommendRequest, request: Request) -> dict:
    """Item-based recommendations: unrated movies scored through movie-movie similarity."""
    metric, n = _resolve_params(request, req.similarity, req.results)
    movies = _run(_recommender(request).item_based_recommended_movies, int(req.userId), metric, n)
    return {"userId": int(req.userId), "similarity": metric.value, "results": [m.__dict__ for m in movies]}


@router.post("/movies/similar-movies", response_model=MovieRecommendResponse)
def similar_movies(req: MovieRecommendRequest, request: Request) -> dict:
    """Movies ranked by similarity to a seed movie."""
    metric, n = _resolve_params(request, req.similarity, req.results)
    movies = _run(_recommender(request).similar_movies, int(req.movieId), metric, n)
    return {"movieId": int(req.movieId), "similarity": metric.value, "results": [m.__dict__ for m in movies]}


@router.post("/movies/recommended-movies-for-movie", response_model=MovieRecommendResponse)
def recommended_movies_for_movie(req: MovieRecommendRequest, request: Request) -> dict:
    """Positively similar movies scored by their similarity-weighted ratings."""
    metric, n = _resolve_params(request, req.similarity, req.results)
    movies = _run(_recommender(request).recommended_movies_for_movie, int(req.movieId), metric, n)
    return {"movieId": int(req.movieId), "similarity": metric.value, "results": [m.__dict__ for m in movies]}


@router.get("/similarities", response_model=SimilaritiesResponse)
def similarities() -> dict:
    """List supported similarity metrics."""
    return {"results": [{"id": m.code, "key": m.value, "text": m.label} for m in SimilarityMetric]}


def create_app(
    *,
    recommender: CollaborativeRecommender | None = None,
    config: AppConfig | None = None,
) -> FastAPI:
    """Build the app. Tests inject `recommender`/`config`; otherwise both come from config.yaml."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        cfg = config
        if cfg is None:
            repo_root = get_repo_root()
            config_path = _get_env_path("CONFIG_PATH", repo_root / "config.yaml")
            cfg = load_config(config_path, repo_root=repo_root)
        setup_logging(cfg.log_level)

        rec = recommender
        if rec is None:
            rec = CollaborativeRecommender(data_dir=cfg.data_dir)
        logger.info("Starting service with data_dir=%s default_similarity=%s", cfg.data_dir, cfg.default_similarity.value)

        app.state.config = cfg
        app.state.recommender = rec
        yield

    app_ = FastAPI(title="Collaborative Filtering Recommendation Service", lifespan=lifespan)
    app_.include_router(router)
    return app_


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("cfrec.service.app:app", host=os.getenv("HOST", "127.0.0.1"), port=int(os.getenv("PORT", "8000")))
