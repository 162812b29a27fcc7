"""Services package — all business logic lives here, never in routers.

Files:
  financials.py            — pure money calculator (sale, tax, total, margin)
  sales_lifecycle.py       — pending -> completed/cancelled rules, update validation
  vehicle_availability.py  — vehicle sold/hold-release side effects
  sales_transaction.py     — orchestration used by the v1 router

Rule: routers call services, services call repositories, repositories call the DB.
      No SQLAlchemy queries in routers. No FastAPI imports in services.
"""
