from .user import UserCreate, UserUpdate, UserLogin, UserResponse, Token
from .customers import CustomerCreate, CustomerUpdate, CustomerResponse
from .suppliers import SupplierCreate, SupplierUpdate, SupplierResponse
from .job_masters import (
    ParticularCreate, ParticularResponse, ColourCreate, ColourResponse,
    BagTypeCreate, BagTypeUpdate, BagTypeResponse,
    CuttingTypeCreate, CuttingTypeResponse, PrintSizeCreate, PrintSizeResponse,
)
from .job_card import JobCardCreate, JobCardUpdate, JobCardResponse, JobCardListItem
from .stock import StockItemResponse, StockDetails, StockRow, StockListResponse
from .slitting import SlittingAttach, SlittingRollCreate, SlittingResponse, SlittingRollResponse
from .printing import PrintAttach, PrintPackCreate, PrintResponse, PrintPackResponse
from .cutting import CuttingAttach, CuttingRollCreate, CuttingResponse, CuttingRollResponse
from .material import MaterialItemCreate, MaterialNoteCreate, MaterialNoteResponse, MaterialImportResponse
from .sales import SalesDocumentCreate, SalesDocumentUpdate, InvoiceCreate, InvoiceUpdate
