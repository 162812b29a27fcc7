"""Pydantic schemas package.

Folder intent:
  common.py             — CamelModel base, Money type, HealthResponse
  sales_transaction.py  — create/update bodies, transaction and summary responses
"""
