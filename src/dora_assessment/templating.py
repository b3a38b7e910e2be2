"""Identity placeholder substitution for question prompts."""

from dora_assessment.constants import (
    FINANCIAL_ENTITY_PLACEHOLDER,
    PROVIDER_PLACEHOLDER,
)
from dora_assessment.models.session import Respondent


def replace_variables(text: str, respondent: Respondent) -> str:
    """Substitute ``{providerName}`` and ``{financialEntityName}`` in ``text``.

    Only the first occurrence of each token is replaced; repeated tokens
    and any other ``{...}`` placeholders are left untouched.
    """
    return (
        text
        .replace(PROVIDER_PLACEHOLDER, respondent.provider_name, 1)
        .replace(FINANCIAL_ENTITY_PLACEHOLDER, respondent.financial_entity_name, 1)
    )
