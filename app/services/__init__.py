"""Services package: all business logic lives here, never in routers.

Files:
  catalog.py        - static price list, budget filtering, build recommendations
  charges.py        - build charge, delivery, GST and order totals
  tracking.py       - tracking codes, status labels, display formatting
  order.py          - order creation, order lines, status changes, tracking lookup
  checkout.py       - order + invoice + confirmation email in one step
  invoice.py        - invoice PDF rendering (PyMuPDF) and lookup
  storage.py        - local bucket for generated files
  notifications.py  - transactional email through Resend
  quotation.py      - vendor component quotes and admin decisions
  vendor.py         - vendor profiles and win/loss stats
  customer.py       - customer profiles

Rule: routers call services, services call repositories, repositories call the DB.
      No SQLAlchemy queries in routers. No FastAPI imports in services.
"""
