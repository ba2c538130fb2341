# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-19
# Description: IndustryInferrer.py
# -----------------------------------------------------------------------------
import logging
from typing import Optional

from providers.ProviderRegistry import ProviderRegistry
from utility.logging_utils import get_class_logger
import settings

INDUSTRY_SYSTEM_PROMPT = "You classify companies into industry sectors. Reply with the label only."

INDUSTRY_PROMPT_TEMPLATE = (
    'Given the company name "{company}", respond with ONLY the industry sector it belongs to. '
    'Use a short, standard industry label (e.g., "Technology", "Finance", "Healthcare", '
    '"Consulting", "Real Estate", "Education", "Government", "Retail", "Manufacturing", '
    '"Legal", "Media", "Energy", "Hospitality", "Transportation", "Nonprofit", "Agriculture"). '
    'If you genuinely cannot determine the industry, respond with just "Other". '
    "Do not include any explanation, just the industry name."
)

FALLBACK_LABEL = "Other"


def clean_industry_label(raw: Optional[str], max_chars: int = settings.INDUSTRY_LABEL_MAX_CHARS) -> Optional[str]:
    """
    Accept only a short single-line label. Anything else means "no inference".
    """
    if raw is None:
        return None
    text = raw.strip()
    if not text or "\n" in text or "\r" in text:
        return None
    text = text.strip("\"'`*. ")
    if not text or len(text) >= max_chars:
        return None
    if text.lower() == FALLBACK_LABEL.lower():
        return FALLBACK_LABEL
    return text


class IndustryInferrer:
    """
    Best-effort industry label for a company name, via the primary backend.
    Never raises: every failure is logged and returns None.
    """

    def __init__(self, *, providers: ProviderRegistry, logger: logging.Logger | None = None) -> None:
        self.providers = providers
        self.logger = logger or get_class_logger(self.__class__)

    def infer(self, company: Optional[str]) -> Optional[str]:
        company = (company or "").strip()
        if not company:
            return None

        try:
            backend = self.providers.primary()
            prompt = INDUSTRY_PROMPT_TEMPLATE.format(company=company)
            raw = "".join(backend.stream_chat(INDUSTRY_SYSTEM_PROMPT, [], prompt))
        except Exception as e:
            self.logger.warning("Industry inference failed for company %r: %s", company, e)
            return None

        label = clean_industry_label(raw)
        if label is None:
            self.logger.info("Rejected industry inference for company %r: %r", company, raw[:80])
        return label
