"""
PM Copilot API Module

FastAPI backend providing REST endpoints for:
- Feedback synthesis (theme scores, quotes, emerging patterns)
- Product plan generation
- The planning methodology behind the scores

Records are supplied in the request body by the caller; this module does
not fetch from the ticket system or the feature board.
"""
