"""v1 router package — all /api/v1/* endpoints live here.

Files:
  sales_transactions.py  — sales transaction CRUD + complete/cancel transitions + summary

Rule: Routers only handle HTTP (request parsing, response shaping).
      All business logic delegates to app/services/.
"""
