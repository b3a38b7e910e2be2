"""Assessment constants shared across the SDK.

These values are referenced by the session, orchestrator, and report
renderer.  Several can be overridden via environment variables so that
deployments can change defaults without code changes.
"""

import os

# Language used when the caller does not pick one.
# Overridable via DORA_DEFAULT_LANGUAGE env var ("es" or "pt").
DEFAULT_LANGUAGE = os.getenv("DORA_DEFAULT_LANGUAGE", "es")

# Catalog version served when a session does not name one.
DEFAULT_CATALOG = os.getenv("DORA_DEFAULT_CATALOG", "dora_v1")

# Upper bound of the chart's score axis.  Option values in the shipped
# catalogs are expressed on a 0-100 scale.
CHART_MAX = int(os.getenv("DORA_CHART_MAX", "100"))

# Identity placeholders substituted into question prompts.
PROVIDER_PLACEHOLDER = "{providerName}"
FINANCIAL_ENTITY_PLACEHOLDER = "{financialEntityName}"

# Literal UI strings, keyed by label id then language.
LABELS: dict[str, dict[str, str]] = {
    "title": {"es": "Cuestionario DORA", "pt": "Questionário DORA"},
    "previous": {"es": "Anterior", "pt": "Anterior"},
    "next": {"es": "Siguiente", "pt": "Seguinte"},
    "save_draft": {"es": "Guardar borrador", "pt": "Salvar rascunho"},
    "submit": {"es": "Enviar", "pt": "Enviar"},
    "submitting": {"es": "Enviando...", "pt": "Enviando..."},
    "observations": {
        "es": "Observaciones (opcional)",
        "pt": "Observações (opcional)",
    },
    "no_questions": {
        "es": "No hay preguntas disponibles.",
        "pt": "Não há perguntas disponíveis.",
    },
    "score": {"es": "Puntuación", "pt": "Pontuação"},
    "score_by_category": {
        "es": "Puntuación por categoría",
        "pt": "Pontuação por categoria",
    },
    "no_data": {"es": "Sin datos", "pt": "Sem dados"},
}
