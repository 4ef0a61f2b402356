"""Collaborative-filtering recommender over users, movies and ratings.

Entry points:
- `cfrec.service.app` (FastAPI service)
- `cfrec.cli` (operator tables in the terminal)
"""
