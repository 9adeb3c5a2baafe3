# orchestrator/chat.py

"""
Chaîne de génération avec fallback ordonné.

Étapes, dans l'ordre, arrêt au premier succès :
→ chaque backend configuré (Groq, puis HuggingFace)
→ résumé hors ligne déterministe, toujours disponible

Un échec reste confiné à son étape : il est loggé, l'étape est marquée
"failed" et on passe à la suivante. Pas de retry, pas de circuit breaker,
rien n'est conservé d'une requête à l'autre.
"""

import logging
from dataclasses import dataclass, field

from models import Focus
from prompts import offline_summary
from services.llm import GenerationBackend

logger = logging.getLogger(__name__)

OFFLINE = "offline"

SKIPPED = "skipped"
FAILED = "failed"
SUCCESS = "success"


@dataclass
class StageOutcome:
    stage: str
    status: str        # "skipped" | "failed" | "success"


@dataclass
class GenerationResult:
    reply: str
    source: str        # nom du backend retenu, ou "offline"
    attempts: list[StageOutcome] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return self.source == OFFLINE


class GenerationFallbackOrchestrator:

    def __init__(self, backends: list[GenerationBackend]):
        self.backends = list(backends)

    def run(
        self,
        focus: Focus,
        context: str,
        system_prompt: str,
        message: str,
    ) -> GenerationResult:
        attempts: list[StageOutcome] = []

        for backend in self.backends:
            if not backend.is_configured():
                logger.info(f"[{backend.name}] Pas de clé configurée — étape ignorée")
                attempts.append(StageOutcome(backend.name, SKIPPED))
                continue

            logger.info(f"[{backend.name}] Tentative de génération")
            reply = self._attempt(backend, system_prompt, message)

            if reply:
                attempts.append(StageOutcome(backend.name, SUCCESS))
                return GenerationResult(reply=reply, source=backend.name, attempts=attempts)

            attempts.append(StageOutcome(backend.name, FAILED))

        logger.warning("Tous les backends ont échoué — résumé hors ligne")
        attempts.append(StageOutcome(OFFLINE, SUCCESS))
        return GenerationResult(
            reply=offline_summary(focus, context),
            source=OFFLINE,
            attempts=attempts,
        )

    def _attempt(self, backend: GenerationBackend, system_prompt: str, message: str) -> str:
        # generate() ne lève pas en principe ; une erreur inattendue
        # ne doit quand même jamais faire échouer la requête
        try:
            return (backend.generate(system_prompt, message) or "").strip()
        except Exception as e:
            logger.exception(f"[{backend.name}] Erreur inattendue : {e}")
            return ""
