from .user import User, UserRole, UserStatus
from .customers import Customer
from .suppliers import Supplier
from .job_masters import Particular, Colour, BagType, CuttingType, PrintSize
from .stock import StockItem, StockStage, StockStatus
from .job_card import JobCard, JobSection
from .slitting import Slitting, SlittingRoll, SlittingWastage
from .printing import Print, PrintPack, PrintWastage
from .cutting import Cutting, CuttingRoll
from .material import MaterialInfo, MaterialItem
from .finished_goods import BundleInfo, CompleteItem, NonCompleteItem, CompleteItemState
from .sales import SalesInfo, SalesItem, DocumentState
from .sales_returns import ReturnInfo, ReturnItem
from .invoices import BillInfo, BillItem
from database import Base

__all__ = [
    "Base", "User", "UserRole", "UserStatus", "Customer", "Supplier",
    "Particular", "Colour", "BagType", "CuttingType", "PrintSize",
    "StockItem", "StockStage", "StockStatus", "JobCard", "JobSection",
    "Slitting", "SlittingRoll", "SlittingWastage",
    "Print", "PrintPack", "PrintWastage", "Cutting", "CuttingRoll",
    "MaterialInfo", "MaterialItem",
    "BundleInfo", "CompleteItem", "NonCompleteItem", "CompleteItemState",
    "SalesInfo", "SalesItem", "DocumentState",
    "ReturnInfo", "ReturnItem", "BillInfo", "BillItem",
]
