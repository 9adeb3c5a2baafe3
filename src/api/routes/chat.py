# api/routes/chat.py

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from api.dependencies import connector_factory, get_orchestrator
from analytics.context import build_context
from models import Focus
from orchestrator.chat import GenerationFallbackOrchestrator
from orchestrator.snapshot import build_snapshot
from prompts import chat_system_prompt

router = APIRouter()
logger = logging.getLogger(__name__)


# ─────────────────────────────────────────
# MODÈLES DE REQUÊTE
# ─────────────────────────────────────────

class ChatRequest(BaseModel):
    message: str = ""
    activeBoard: Optional[str] = None    # "work_orders" | "deals" | ...


# ─────────────────────────────────────────
# ROUTES
# ─────────────────────────────────────────

@router.post("/chat")
def post_chat(
    body: ChatRequest,
    build_connector=Depends(connector_factory),
    orchestrator: GenerationFallbackOrchestrator = Depends(get_orchestrator),
):
    """
    Répond à une question sur les boards.
    Seul un échec du fetch fait échouer la requête :
    la génération retombe toujours au minimum sur le résumé hors ligne.
    """
    try:
        snapshot = build_snapshot(build_connector())
    except Exception as e:
        logger.error(f"Erreur chat (fetch) : {e}")
        return JSONResponse(
            status_code=500,
            content={"error": str(e) or "Internal Server Error"},
        )

    focus = Focus.from_board(body.activeBoard)
    context = build_context(
        focus, snapshot.kpis, snapshot.deals, snapshot.work_orders
    )
    system_prompt = chat_system_prompt(
        body.message, focus, context, snapshot.data_quality
    )
    logger.debug(f"Prompt généré :\n{system_prompt}")

    result = orchestrator.run(focus, context, system_prompt, body.message)
    logger.info(
        f"Réponse chat via {result.source} — "
        + ", ".join(f"{a.stage}={a.status}" for a in result.attempts)
    )

    return {
        "reply": result.reply,
        "kpis": snapshot.kpis.to_dict(),
        "dataQuality": snapshot.data_quality.to_dict(),
    }
