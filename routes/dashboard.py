from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from sqlalchemy import func
import logging

from database import get_db
from models.user import User
from models.customers import Customer
from models.job_card import JobCard, JobSection
from models.stock import StockItem, StockStatus
from models.finished_goods import CompleteItem
from dependencies import get_current_user
from utils.job_cards import section_filter
from utils.finished_goods import in_hand_items

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard")


@router.get("")
def get_dashboard(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Headline counts for the landing page"""
    try:
        active_cards = db.query(func.count(JobCard.id)).filter(JobCard.del_ind == 0)
        return {
            "jobcardCount": active_cards.scalar(),
            "slittingCount": active_cards.filter(section_filter(JobSection.SLITTING)).scalar(),
            "printingCount": active_cards.filter(section_filter(JobSection.PRINTING)).scalar(),
            "cuttingCount": active_cards.filter(section_filter(JobSection.CUTTING)).scalar(),
            "customerCount": db.query(func.count(Customer.id)).filter(Customer.del_ind == 1).scalar(),
            "stockAvailable": db.query(func.count(StockItem.id)).filter(
                StockItem.material_status == StockStatus.AVAILABLE
            ).scalar(),
            "stockInHandBags": int(
                in_hand_items(db).with_entities(
                    func.coalesce(func.sum(CompleteItem.complete_item_bags), 0)
                ).scalar() or 0
            ),
        }
    except Exception as e:
        logger.error(f"Error building dashboard: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch dashboard data")
