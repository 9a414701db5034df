import json
from typing import Any, Dict, Optional

DEFAULT_LANGUAGE = "no"
DEFAULT_COUNTRY = "NO"


def build_request_body(
    method: str,
    params: Dict[str, Any],
    provider: Optional[int],
    language: str = DEFAULT_LANGUAGE,
    country: str = DEFAULT_COUNTRY,
) -> Dict[str, Dict[str, Any]]:
    """Wraps the call parameters in the method-keyed envelope the catalog expects.

    Caller-supplied parameters win over the provider/lang/country defaults.
    """
    return {
        method: {
            "provider": provider,
            "lang": language,
            "country": country,
            **params,
        }
    }


def fingerprint(method: str, params: Dict[str, Any]) -> str:
    """Cache key for a call: method name plus the parameters as canonical JSON."""
    return f"{method}-{json.dumps(params, sort_keys=True, default=str)}"
