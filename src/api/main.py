# api/main.py

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import load_settings
from api.routes import chat, kpi

# Charge .env en local uniquement (en prod la plateforme injecte les vars)
load_dotenv()

# Lue une seule fois, en lecture seule ensuite
settings = load_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s : %(message)s",
)
logger = logging.getLogger("skylark.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.settings = settings
    logger.info(
        "Skylark API — Démarrage "
        f"(groq={'on' if settings.groq_api_key else 'off'}, "
        f"huggingface={'on' if settings.hf_api_key else 'off'})"
    )
    yield
    logger.info("Skylark API — Arrêt")


app = FastAPI(
    title="Skylark API",
    version="1.0.0",
    description="KPIs des boards monday.com et réponses BI",
    lifespan=lifespan,
)
app.state.settings = settings

# ─────────────────────────────────────────
# CORS
# FRONTEND_ORIGINS="https://skylark.vercel.app,https://..."
# ─────────────────────────────────────────
origins = ["http://localhost:3000"]
origins.extend(settings.frontend_origins)

app.add_middleware(
    CORSMiddleware,
    allow_origins=sorted(set(origins)),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ─────────────────────────────────────────
# ROUTES
# ─────────────────────────────────────────
app.include_router(kpi.router, prefix="/api", tags=["kpi"])
app.include_router(chat.router, prefix="/api", tags=["chat"])

# ─────────────────────────────────────────
# HEALTH
# ─────────────────────────────────────────
@app.get("/")
def root() -> dict:
    return {"status": "ok", "service": "skylark-api"}

@app.get("/health")
def health() -> dict:
    return {"status": "ok", "service": "skylark-api"}

# ─────────────────────────────────────────
# ERREURS GLOBALES
# ─────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Erreur non gérée — {request.method} {request.url}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": "Internal Server Error", "details": str(exc)},
    )
