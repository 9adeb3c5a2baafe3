# services/llm.py

import logging
from abc import ABC, abstractmethod

import requests

from config import Settings
from prompts import instruction_prompt

logger = logging.getLogger(__name__)

# ─────────────────────────────────────────
# BACKENDS
# Groq        → chat completion (compatible OpenAI), rapide
# HuggingFace → instruction completion, secours si Groq tombe
# Un seul essai par requête, timeout borné, jamais de retry
# ─────────────────────────────────────────

GROQ_URL = "https://api.groq.com/openai/v1/chat/completions"

GROQ_TEMPERATURE = 0.7
HF_MAX_NEW_TOKENS = 500


class GenerationError(Exception):
    """Réponse inexploitable d'un backend (HTTP, forme du JSON)."""


class GenerationBackend(ABC):
    """
    Contrat uniforme pour tous les backends de génération.

    generate() ne lève jamais : le texte généré, ou "" en cas d'échec.
    Les sous-classes implémentent _invoke() et peuvent lever librement
    (requests.RequestException, GenerationError).
    """

    name: str = ""

    def __init__(self, api_key: str, timeout: float):
        self.api_key = api_key
        self.timeout = timeout

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def generate(self, system_prompt: str, message: str) -> str:
        try:
            text = self._invoke(system_prompt, message)

        except requests.RequestException as e:
            logger.warning(f"[{self.name}] Erreur réseau : {e}")
            return ""

        except GenerationError as e:
            logger.warning(f"[{self.name}] Échec : {e}")
            return ""

        text = (text or "").strip()
        if text:
            logger.info(f"[{self.name}] Succès — {len(text)} caractères")
        else:
            logger.warning(f"[{self.name}] Réponse vide")
        return text

    @abstractmethod
    def _invoke(self, system_prompt: str, message: str) -> str:
        pass

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _check_status(self, response: requests.Response) -> None:
        if not response.ok:
            raise GenerationError(
                f"HTTP {response.status_code} — {response.text[:200]}"
            )


class GroqBackend(GenerationBackend):

    name = "groq"

    def __init__(self, api_key: str, timeout: float, model: str):
        super().__init__(api_key, timeout)
        self.model = model

    def _invoke(self, system_prompt: str, message: str) -> str:
        response = requests.post(
            GROQ_URL,
            headers=self._headers(),
            json={
                "model": self.model,
                "messages": [
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": message},
                ],
                "temperature": GROQ_TEMPERATURE,
            },
            timeout=self.timeout,
        )
        self._check_status(response)
        data = response.json()

        try:
            return data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError) as e:
            raise GenerationError(f"Réponse sans choices exploitable : {e!r}") from e


class HuggingFaceBackend(GenerationBackend):

    name = "huggingface"

    def __init__(self, api_key: str, timeout: float, model_url: str):
        super().__init__(api_key, timeout)
        self.model_url = model_url

    def _invoke(self, system_prompt: str, message: str) -> str:
        # La question est déjà incluse dans le prompt système
        response = requests.post(
            self.model_url,
            headers=self._headers(),
            json={
                "inputs": instruction_prompt(system_prompt),
                "parameters": {
                    "max_new_tokens": HF_MAX_NEW_TOKENS,
                    "return_full_text": False,
                },
            },
            timeout=self.timeout,
        )
        self._check_status(response)
        data = response.json()

        try:
            return data[0]["generated_text"] or ""
        except (KeyError, IndexError, TypeError) as e:
            raise GenerationError(f"Réponse sans generated_text : {e!r}") from e


def build_backends(settings: Settings) -> list[GenerationBackend]:
    """
    Ordre de la chaîne de fallback.
    Ajouter un backend = ajouter une ligne ici.
    """
    return [
        GroqBackend(
            settings.groq_api_key,
            timeout=settings.llm_timeout_seconds,
            model=settings.groq_model,
        ),
        HuggingFaceBackend(
            settings.hf_api_key,
            timeout=settings.llm_timeout_seconds,
            model_url=settings.hf_model_url,
        ),
    ]
