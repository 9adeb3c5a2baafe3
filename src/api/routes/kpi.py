# api/routes/kpi.py

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.dependencies import connector_factory
from orchestrator.snapshot import build_snapshot

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/kpi")
def get_kpis(build_connector=Depends(connector_factory)):
    """
    KPIs + rapport qualité, calculés à la demande.
    Tout ou rien : la moindre erreur de fetch → 500.
    """
    try:
        snapshot = build_snapshot(build_connector())
        return {
            "kpis": snapshot.kpis.to_dict(),
            "dataQuality": snapshot.data_quality.to_dict(),
        }

    except Exception as e:
        logger.error(f"Erreur get_kpis : {e}")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to fetch KPIs", "details": str(e)},
        )
