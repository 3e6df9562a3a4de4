"""Fill missing company fields using an external text-inference service."""
from typing import Any, Dict, List, Optional, Protocol
import json
import logging

from openai import OpenAI, OpenAIError

from .cleaner import CleanCompany

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You clean messy company data. Only fill missing fields. Never modify provided "
    "non-null fields. If uncertain, return null.\n"
    "Rules: (1) If domain is missing and name is a single brand token (letters/digits "
    "only, e.g. airbnb), set domain to '<brand>.com'.\n"
    "(2) If any input suggests global/worldwide, set country to 'Global'.\n"
    "(3) If country is missing but city is present (e.g. San Francisco, Palo Alto), "
    "infer the country and keep city.\n"
    "Return JSON with keys: name, domain, country, city, employee_size_bucket."
)


class InferenceService(Protocol):
    """Black-box service guessing company fields from partial data."""

    def infer(self, context: Dict[str, Any], missing: List[str]) -> Dict[str, Any]:
        """Return best-effort guesses for the missing fields, or an empty dict."""
        ...


class OpenAIInferenceService:
    """Inference service backed by an OpenAI chat completion in JSON mode."""

    def __init__(
        self,
        api_key: str,
        model: str = 'gpt-4o-mini',
        timeout: float = 20.0,
        client: Optional[OpenAI] = None
    ):
        """Initialize the service.

        Args:
            api_key: OpenAI API key
            model: Chat completion model name
            timeout: Request timeout in seconds
            client: Optional preconfigured client
        """
        self.model = model
        self.client = client or OpenAI(api_key=api_key.strip(), timeout=timeout, max_retries=0)

    def infer(self, context: Dict[str, Any], missing: List[str]) -> Dict[str, Any]:
        payload = json.dumps({
            'missing': missing,
            'context': context.get('fields', {}),
            'row': context.get('row', {})
        }, default=str)

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {'role': 'system', 'content': SYSTEM_PROMPT},
                    {'role': 'user', 'content': payload}
                ],
                temperature=0.2,
                response_format={'type': 'json_object'}
            )
        except OpenAIError as e:
            logger.warning(f"Inference request failed: {e}")
            return {}

        content = (response.choices[0].message.content if response.choices else None) or '{}'
        try:
            parsed = json.loads(content)
        except json.JSONDecodeError:
            logger.warning("Inference response was not valid JSON")
            return {}

        return parsed if isinstance(parsed, dict) else {}


class EnrichmentAdapter:
    """Asks the inference service for fields that cleaning left empty.

    The adapter never raises: a disabled service, transport errors and
    malformed responses all result in an empty dictionary. Only fields that
    were missing on input are ever returned.
    """

    def __init__(self, service: Optional[InferenceService], enabled: bool = True, debug: bool = False):
        self.service = service
        self.enabled = enabled and service is not None
        self.debug = debug
        self.logger = logging.getLogger(self.__class__.__name__)

    def enrich(self, company: CleanCompany) -> Dict[str, str]:
        """Return guesses for the missing fields of a company.

        Args:
            company: Cleaned company record

        Returns:
            Dictionary of field name to guessed string value, possibly empty
        """
        if not self.enabled:
            return {}

        missing = company.missing_fields()
        if not missing:
            return {}

        present = {name: value for name, value in company.fields().items() if value is not None}
        context = {'fields': present, 'row': company.raw_json}

        try:
            response = self.service.infer(context, missing)
        except Exception as e:
            self.logger.warning(f"Enrichment failed for {present.get('name') or present.get('domain')}: {e}")
            return {}

        if not isinstance(response, dict):
            return {}

        hints = {}
        for name in missing:
            value = response.get(name)
            if isinstance(value, str) and value.strip():
                hints[name] = value.strip()

        if self.debug:
            self.logger.debug(f"Enrichment filled {sorted(hints)} of missing {missing}")
        return hints
