"""Async PostgreSQL repositories using asyncpg connection pooling"""

from database.repositories_async.base import BaseRepository
from database.repositories_async.aggregates import AggregateRepository
from database.repositories_async.candidates import CandidateRepository
from database.repositories_async.votes import VoteRepository

__all__ = [
    "BaseRepository",
    "AggregateRepository",
    "CandidateRepository",
    "VoteRepository",
]
