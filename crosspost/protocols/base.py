from typing import Any

import httpx

from ..domain.errors import PlatformError


def check_response(response: httpx.Response, target: str) -> dict[str, Any]:
    """
    Return the JSON body of a successful platform response.

    Raises:
        PlatformError: For any non-2xx status, carrying the raw error body
    """
    if response.is_error:
        try:
            payload: Any = response.json()
        except ValueError:
            payload = response.text
        raise PlatformError(target, response.status_code, payload)

    if not response.content:
        return {}
    try:
        data = response.json()
    except ValueError:
        return {"raw": response.text}
    return data if isinstance(data, dict) else {"data": data}


def created_id(response: httpx.Response, target: str, key: str = "id") -> str:
    """
    Return the identifier a create or upload call hands back.

    Raises:
        PlatformError: For a non-2xx status, or a success body without the id
    """
    data = check_response(response, target)
    created = data.get(key)
    if not created:
        raise PlatformError(target, response.status_code, data or {"missing": key})
    return str(created)
