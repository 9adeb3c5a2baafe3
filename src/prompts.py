# prompts.py

from models import Focus, DataQualityReport


FOCUS_LABELS = {
    Focus.SALES: "SALES",
    Focus.OPERATIONS: "OPERATIONS",
}

SUMMARY_TITLES = {
    Focus.SALES: "Pipeline Summary",
    Focus.OPERATIONS: "Operations Summary",
}

UNAVAILABLE_NOTICE = (
    "*Note: AI services are currently unavailable. "
    "Check server logs for details.*"
)


# ─────────────────────────────────────────
# CHAT : PROMPT SYSTÈME
# ─────────────────────────────────────────

def chat_system_prompt(
    message: str,
    focus: Focus,
    context: str,
    quality: DataQualityReport,
) -> str:
    """
    Prompt système du chat.
    Le modèle ne doit répondre qu'à partir du bloc de contexte
    et des avertissements qualité, jamais de données externes.
    """
    warnings = data_quality_warnings(quality)

    return (
        "You are Skylark, an advanced BI AI.\n"
        f'User Question: "{message}"\n'
        "\n"
        f"CONTEXT ({FOCUS_LABELS[focus]}):\n"
        f"{context}\n"
        "\n"
        "DATA QUALITY WARNINGS:\n"
        f"{warnings or '- None'}\n"
        "\n"
        "INSTRUCTIONS:\n"
        "- Answer ONLY based on the provided context.\n"
        "- If the context does not contain the answer, say so.\n"
        "- Be professional and concise."
    )


def data_quality_warnings(quality: DataQualityReport) -> str:
    if quality.missing_deal_value > 0:
        return f"- {quality.missing_deal_value} deals missing value"
    return ""


def instruction_prompt(system_prompt: str) -> str:
    """Format instruction Mistral : un seul bloc [INST]."""
    return f"<s>[INST] {system_prompt} [/INST]"


# ─────────────────────────────────────────
# FALLBACK HORS LIGNE
# ─────────────────────────────────────────

def offline_summary(focus: Focus, context: str) -> str:
    """Résumé déterministe quand aucun backend n'a répondu."""
    return (
        f"**{SUMMARY_TITLES[focus]}**\n"
        f"{context}\n"
        "\n"
        f"{UNAVAILABLE_NOTICE}"
    )
