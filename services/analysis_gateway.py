from typing import Any, Dict, Optional
import logging
import requests

logger = logging.getLogger(__name__)


class AnalysisGateway:
    """
    Forwards prompt text to a Gemini-style generateContent endpoint.
    Failures are reported as {"success": False, "error": ...}, never raised.
    """

    def __init__(self, api_key: Optional[str], api_url: str, timeout: float = 30.0):
        self._api_key = api_key
        self.api_url = api_url
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    def analyze(self, prompt_text: str) -> Dict[str, Any]:
        if not self.configured:
            return {"success": False, "error": "Analysis service is not configured"}

        body = {"contents": [{"parts": [{"text": prompt_text}]}]}
        try:
            response = requests.post(
                self.api_url,
                params={"key": self._api_key},
                json=body,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            # the request URL carries the key; log only the class name
            logger.error("Analysis request failed: %s", type(e).__name__)
            return {"success": False, "error": "Analysis request failed"}

        # requests.exceptions.JSONDecodeError subclasses ValueError
        try:
            data = response.json()
        except ValueError:
            logger.error("Analysis response was not valid JSON")
            return {"success": False, "error": "Malformed response from analysis service"}

        result = _extract_text(data)
        if result is None:
            logger.error("Analysis response missing candidates")
            return {"success": False, "error": "Malformed response from analysis service"}
        return {"success": True, "result": result}


def _extract_text(data: Any) -> Optional[str]:
    try:
        parts = data["candidates"][0]["content"]["parts"]
        return "".join(part.get("text", "") for part in parts)
    except (KeyError, IndexError, TypeError, AttributeError):
        return None
