"""Pydantic schemas for the recommendation API."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class TopMatchingUsersRequest(BaseModel):
    """Request for users with similar rating patterns."""

    similarity: Optional[str] = Field(None, description="Similarity metric: EUCLIDEAN or PEARSON (default from config)")
    userId: int = Field(..., description="Target UserId from users.csv")
    results: Optional[int] = Field(None, ge=0, description="Number of users to return (default from config; at most service.max_results)")


class UserRecommendRequest(BaseModel):
    """Request for movie recommendations to a user (user-based or item-based)."""

    similarity: Optional[str] = Field(None, description="Similarity metric: EUCLIDEAN or PEARSON (default from config)")
    userId: int = Field(..., description="Target UserId from users.csv")
    results: Optional[int] = Field(None, ge=0, description="Number of movies to return (default from config; at most service.max_results)")


class MovieRecommendRequest(BaseModel):
    """Request seeded by a movie (similar movies, recommendations for a movie)."""

    similarity: Optional[str] = Field(None, description="Similarity metric: EUCLIDEAN or PEARSON (default from config)")
    movieId: int = Field(..., description="Seed MovieId from movies.csv")
    results: Optional[int] = Field(None, ge=0, description="Number of movies to return (default from config; at most service.max_results)")


class UserItem(BaseModel):
    userId: int
    name: str


class MovieItem(BaseModel):
    movieId: int
    title: str
    year: Optional[int] = None


class RankedUserItem(BaseModel):
    userId: int
    name: str
    score: float


class RankedMovieItem(BaseModel):
    movieId: int
    title: str
    year: Optional[int] = None
    score: float


class UsersResponse(BaseModel):
    results: list[UserItem]


class MoviesResponse(BaseModel):
    results: list[MovieItem]


class TopMatchingUsersResponse(BaseModel):
    userId: int
    similarity: str
    results: list[RankedUserItem]


class UserRecommendResponse(BaseModel):
    userId: int
    similarity: str
    results: list[RankedMovieItem]


class MovieRecommendResponse(BaseModel):
    movieId: int
    similarity: str
    results: list[RankedMovieItem]


class SimilarityItem(BaseModel):
    id: int
    key: str
    text: str


class SimilaritiesResponse(BaseModel):
    results: list[SimilarityItem]
