# Services package init
"""
CatVote: Services Layer
=======================

What:  Business logic between routes (HTTP) and the store (persistence).
How:   Services receive an AsyncSession per call, run queries, and return
       schema objects. They hold no state between calls.

Service Inventory:
    - CatService:    vote aggregation list, seeding, bulk clear
    - VoteService:   recording a single vote
    - WinnerService: monthly winner read and recording job
"""
