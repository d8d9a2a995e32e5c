"""
Shared helper functions for the Knowledge and Plan connectors.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from datasources.exceptions import DataSourceUnavailable, InvalidQuery, QueryTimeout


async def request_json(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    params: Optional[Dict[str, Any]] = None,
    json: Any = None,
    headers: Optional[Dict[str, str]] = None,
    service_name: str = "data source",
) -> Any:
    """Send a request and decode the JSON body; an empty body decodes to ``None``."""
    try:
        resp = await client.request(method, url, params=params, json=json, headers=headers)
        resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise InvalidQuery(
            f"{service_name} {method} {url} failed [{e.response.status_code}]: {e.response.text}"
        ) from e
    except httpx.TimeoutException as e:
        raise QueryTimeout(f"{service_name} {method} {url} timed out") from e
    except httpx.RequestError as e:
        raise DataSourceUnavailable(f"Cannot reach {service_name} at {url}") from e
    if not resp.content:
        return None
    return resp.json()
