# config.py

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional


class ConfigError(RuntimeError):
    """Configuration manquante ou invalide (clé API, board id)."""


# ─────────────────────────────────────────
# VALEURS PAR DÉFAUT
# Les timeouts sont volontairement bornés :
# aucun appel sortant ne doit bloquer une requête indéfiniment
# ─────────────────────────────────────────

DEFAULT_GROQ_MODEL = "llama-3.3-70b-versatile"
DEFAULT_HF_MODEL_URL = (
    "https://router.huggingface.co/mistralai/Mistral-7B-Instruct-v0.3"
)
DEFAULT_MONDAY_TIMEOUT_SECONDS = 30.0
DEFAULT_LLM_TIMEOUT_SECONDS = 20.0
DEFAULT_ITEMS_LIMIT = 500


@dataclass(frozen=True)
class Settings:
    # Source de données
    monday_api_key: str = ""
    deals_board_id: str = ""
    work_orders_board_id: str = ""
    monday_timeout_seconds: float = DEFAULT_MONDAY_TIMEOUT_SECONDS
    items_limit: int = DEFAULT_ITEMS_LIMIT

    # Génération (chaque clé est optionnelle)
    groq_api_key: str = ""
    groq_model: str = DEFAULT_GROQ_MODEL
    hf_api_key: str = ""
    hf_model_url: str = DEFAULT_HF_MODEL_URL
    llm_timeout_seconds: float = DEFAULT_LLM_TIMEOUT_SECONDS

    # API
    log_level: str = "INFO"
    frontend_origins: tuple[str, ...] = field(default_factory=tuple)

    def board_ids(self) -> tuple[int, int]:
        """
        Retourne (deals, work_orders).
        Lève ConfigError si un des deux ids est absent ou non numérique.
        """
        if not self.deals_board_id or not self.work_orders_board_id:
            raise ConfigError(
                "Missing DEALS_BOARD_ID or WORK_ORDERS_BOARD_ID "
                "in environment variables"
            )
        try:
            return int(self.deals_board_id), int(self.work_orders_board_id)
        except ValueError as e:
            raise ConfigError(
                f"DEALS_BOARD_ID and WORK_ORDERS_BOARD_ID must be numeric : {e}"
            ) from e

    def require_monday_key(self) -> str:
        if not self.monday_api_key:
            raise ConfigError("MONDAY_API_KEY is missing in environment variables.")
        return self.monday_api_key


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Construit la configuration une seule fois au démarrage.
    Les composants la reçoivent ensuite en paramètre,
    plus aucun os.environ dispersé dans le code.
    """
    env = os.environ if environ is None else environ

    origins = tuple(
        o.strip()
        for o in env.get("FRONTEND_ORIGINS", "").split(",")
        if o.strip()
    )

    return Settings(
        monday_api_key=env.get("MONDAY_API_KEY", "").strip(),
        deals_board_id=env.get("DEALS_BOARD_ID", "").strip(),
        work_orders_board_id=env.get("WORK_ORDERS_BOARD_ID", "").strip(),
        monday_timeout_seconds=_float(
            env.get("MONDAY_TIMEOUT_SECONDS"), DEFAULT_MONDAY_TIMEOUT_SECONDS
        ),
        items_limit=_int(env.get("MONDAY_ITEMS_LIMIT"), DEFAULT_ITEMS_LIMIT),
        groq_api_key=env.get("GROQ_API_KEY", "").strip(),
        groq_model=env.get("GROQ_MODEL", "").strip() or DEFAULT_GROQ_MODEL,
        hf_api_key=env.get("HF_API_KEY", "").strip(),
        hf_model_url=env.get("HF_MODEL_URL", "").strip() or DEFAULT_HF_MODEL_URL,
        llm_timeout_seconds=_float(
            env.get("LLM_TIMEOUT_SECONDS"), DEFAULT_LLM_TIMEOUT_SECONDS
        ),
        log_level=_log_level(env.get("LOG_LEVEL")),
        frontend_origins=origins,
    )


# ─────────────────────────────────────────
# UTILITAIRES INTERNES
# ─────────────────────────────────────────

def _float(value, default: float) -> float:
    try:
        return float(value) if value else default
    except (ValueError, TypeError):
        return default


def _int(value, default: int) -> int:
    try:
        return int(value) if value else default
    except (ValueError, TypeError):
        return default


def _log_level(value) -> str:
    # niveau inconnu → INFO, basicConfig lèverait sinon au démarrage
    level = (value or "").strip().upper()
    if isinstance(logging.getLevelName(level), int):
        return level
    return "INFO"
