from fastapi import APIRouter, Depends

from expense_tracker.api.dependencies import get_components
from expense_tracker.orchestrator import AppComponents

router = APIRouter(prefix="/api", tags=["Categories"])

@router.get("/categories")
def suggested_categories(components: AppComponents = Depends(get_components)):
    # advisory only; any non-empty category is accepted
    return {"categories": components.app_settings.suggested_categories_list}
