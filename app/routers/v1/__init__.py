"""v1 router package: all /api/v1/* endpoints live here.

Files:
  catalog.py     - component lists, build recommendations, price quotes (no DB)
  orders.py      - checkout, order admin, order lines, invoices
  tracking.py    - public lookup by tracking id
  vendors.py     - vendor profiles, stats, component quoting
  quotations.py  - admin review and decision on vendor quotations
  customers.py   - customer profiles and their orders
  files.py       - serves stored invoice files

Rule: Routers only handle HTTP (request parsing, response shaping).
      All business logic delegates to app/services/.
"""

from fastapi import APIRouter

from app.routers.v1.catalog import router as catalog_router
from app.routers.v1.customers import router as customers_router
from app.routers.v1.files import router as files_router
from app.routers.v1.orders import router as orders_router
from app.routers.v1.quotations import router as quotations_router
from app.routers.v1.tracking import router as tracking_router
from app.routers.v1.vendors import router as vendors_router

api_router = APIRouter()
for _router in (
    catalog_router,
    orders_router,
    tracking_router,
    vendors_router,
    quotations_router,
    customers_router,
    files_router,
):
    api_router.include_router(_router)
