"""Pydantic schemas package.

Folder intent:
  common.py     - CamelModel base + HealthResponse (all schemas inherit CamelModel)
  catalog.py    - catalog items, recommendations, pricing requests and quotes
  order.py      - checkout payload, orders, order lines, status history, tracking view
  quotation.py  - per-component vendor quotes and order-level quotations
  vendor.py     - vendor profiles, stats, processed orders
  customer.py   - customer profiles
  tracking.py   - files attached to orders and invoice URLs
"""
