from .user import router as user_router
from .dashboard import router as dashboard_router
from .customers import router as customers_router
from .suppliers import router as suppliers_router
from .job_masters import router as job_masters_router
from .job_card import router as job_card_router
from .slitting import router as slitting_router
from .printing import router as printing_router
from .cutting import router as cutting_router
from .material import router as material_router
from .stock import router as stock_router
from .sales_do import router as sales_do_router
from .sales_invoice import router as sales_invoice_router
from .sales_return import router as sales_return_router
from fastapi import APIRouter

# Create main router
router = APIRouter()

# Include auth and user routes
router.include_router(user_router, tags=["Authentication & Users"])

# Include dashboard routes
router.include_router(dashboard_router, tags=["Dashboard"])

# Include customer and supplier routes
router.include_router(customers_router, tags=["Customers"])
router.include_router(suppliers_router, tags=["Suppliers"])

# Include job master routes (colours, bag types, cutting types, print sizes, roll types)
router.include_router(job_masters_router, tags=["Job Masters"])

# Include job card routes
router.include_router(job_card_router, tags=["Job Cards"])

# Include process stage routes
router.include_router(slitting_router, tags=["Slitting"])
router.include_router(printing_router, tags=["Printing"])
router.include_router(cutting_router, tags=["Cutting"])

# Include material receiving routes
router.include_router(material_router, tags=["Material Receiving"])

# Include stock and finished goods routes
router.include_router(stock_router, tags=["Stock & Finished Goods"])

# Include sales routes
router.include_router(sales_do_router, tags=["Delivery Orders"])
router.include_router(sales_invoice_router, tags=["Invoices"])
router.include_router(sales_return_router, tags=["Sales Returns"])

__all__ = ["router"]
