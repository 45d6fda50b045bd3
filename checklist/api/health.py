# checklist/api/health.py
from fastapi import APIRouter, Depends

from checklist.api.deps import get_repository
from checklist.services.inspection_repository import InspectionStore

router = APIRouter()


@router.get("/health")
def health(repository: InspectionStore = Depends(get_repository)):
    storage_ok = repository.ping()
    return {
        "status": "ok",
        "storage": "available" if storage_ok else "unavailable",
    }
