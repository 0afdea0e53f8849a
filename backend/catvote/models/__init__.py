"""
ORM models for the three store tables.

Importing this package registers every table with `Base.metadata`.
"""

from catvote.models.cat import Cat
from catvote.models.monthly_winner import MonthlyWinner
from catvote.models.vote import Vote, VoteType

__all__ = ["Cat", "Vote", "VoteType", "MonthlyWinner"]
