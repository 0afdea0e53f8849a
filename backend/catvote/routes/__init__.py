# Routes package init
"""
CatVote: API Routes Package
===========================

Route Inventory:
    - cats.py:        GET  /api/cats     (aggregated list)
                      POST /api/cats     (seed batch)
    - votes.py:       POST /api/votes    (record a vote)
    - winner.py:      GET  /api/winner   (current month's winner)
                      POST /api/winner   (record a month's winner)
    - maintenance.py: POST /api/clear    (delete everything)
    - health.py:      GET  /api/health   (liveness)

Routes stay thin: they validate input via schemas, call a service, and return
the response model. Business logic lives in catvote.services.
"""
