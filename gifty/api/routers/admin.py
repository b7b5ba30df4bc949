from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gifty.api.deps import CurrentUser, require_admin
from gifty.data.database import get_db
from gifty.domain.schemas import StatsOut
from gifty.services.stats_service import StatsService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/stats", response_model=StatsOut)
def get_stats(_: CurrentUser = Depends(require_admin), db: Session = Depends(get_db)):
    return StatsService(db).get_stats()
