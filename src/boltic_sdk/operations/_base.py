# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Shared plumbing for the resource operation namespaces."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Mapping, Optional, TYPE_CHECKING
from urllib.parse import quote

from ..common.constants import DB_ID_PARAM, TABLES_BASE_PATH
from ..core import _error_codes as ec
from ..core.errors import BolticError, ValidationError, format_error
from ..core.results import ApiResponse, PaginationInfo

if TYPE_CHECKING:
    from ..client import BolticClient

_logger = logging.getLogger(__name__)

_PATH_PARAM = re.compile(r"\{([^}]+)\}")


def build_endpoint_path(template: str, **params: str) -> str:
    """
    Substitute URL-encoded ``params`` into ``{name}`` placeholders of ``template``.

    :raises ~boltic_sdk.core.errors.ValidationError: If a placeholder has no value.
    """
    path = template
    for key, value in params.items():
        path = path.replace("{" + key + "}", quote(str(value), safe=""))
    missing = _PATH_PARAM.findall(path)
    if missing:
        raise ValidationError(
            f"Missing path parameters: {', '.join(missing)}",
            subcode=ec.VALIDATION_MISSING_PATH_PARAMETER,
            errors=[{"field": name, "message": "Path parameter is required"} for name in missing],
        )
    return path


def build_query_params(options: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """
    Translate query options into query string parameters.

    ``fields`` and ``sort`` lists are comma joined (sort entries are either
    ``"name:asc"`` strings or ``{"field": ..., "order": ...}`` mappings),
    ``limit``/``offset`` pass through, and each ``where`` condition becomes a
    ``where[<key>]`` parameter with nested values JSON encoded.
    """
    options = options or {}
    params: Dict[str, Any] = {}

    fields = options.get("fields")
    if fields:
        params["fields"] = ",".join(fields)

    sort = options.get("sort")
    if sort:
        parts = []
        for entry in sort:
            if isinstance(entry, Mapping):
                parts.append(f"{entry['field']}:{entry.get('order', 'asc')}")
            else:
                parts.append(str(entry))
        params["sort"] = ",".join(parts)

    for key in ("limit", "offset"):
        if options.get(key) is not None:
            params[key] = options[key]

    for key, value in (options.get("where") or {}).items():
        if value is None:
            continue
        params[f"where[{key}]"] = json.dumps(value) if isinstance(value, (dict, list)) else value

    return params


def _require_where(options: Optional[Mapping[str, Any]], operation: str) -> Dict[str, Any]:
    where = dict((options or {}).get("where") or {})
    if not where:
        raise ValidationError(
            f"{operation} requires at least one where condition",
            subcode=ec.VALIDATION_WHERE_REQUIRED,
            errors=[{"field": "where", "message": f"Where clause is required for {operation} operation"}],
        )
    return where


def _items(payload: Any, *keys: str) -> List[Any]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, Mapping):
        for key in keys:
            if isinstance(payload.get(key), list):
                return payload[key]
    return []


class _ResourceOperations:
    """Base class for namespaces that issue calls through the client's HTTP pipeline."""

    def __init__(self, client: BolticClient) -> None:
        self._client = client

    def _database_id(self) -> Optional[str]:
        context = self._client.get_database_context()
        return context.database_id if context else None

    def _with_database_params(self, params: Dict[str, Any]) -> Dict[str, Any]:
        database_id = self._database_id()
        if database_id and DB_ID_PARAM not in params:
            params[DB_ID_PARAM] = database_id
        return params

    async def _request(
        self,
        method: str,
        path: str,
        *,
        data: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> ApiResponse:
        http = self._client.get_http_client()
        try:
            response = await http.request(method, path, data=data, params=params)
        except BolticError as exc:
            if self._client.get_config().debug:
                _logger.debug("%s %s failed: %s", method, path, format_error(exc))
            return ApiResponse(error=format_error(exc), details=exc.to_dict())

        body = response.data
        if isinstance(body, Mapping):
            api_error = body.get("error")
            if api_error:
                message = api_error.get("message") if isinstance(api_error, Mapping) else str(api_error)
                return ApiResponse(error=message or "Unknown error", details=api_error)
            return ApiResponse(
                data=body.get("data", body),
                pagination=PaginationInfo.from_api_response(body.get("pagination")),
            )
        return ApiResponse(data=body)

    async def _find_table(self, name: str) -> ApiResponse:
        where: Dict[str, Any] = {"name": name}
        params = build_query_params({"where": where, "limit": 1})
        result = await self._request("GET", TABLES_BASE_PATH, params=self._with_database_params(params))
        if not result.ok:
            return result
        tables = _items(result.data, "tables")
        return ApiResponse(data=tables[0] if tables else None)

    async def _resolve_table_id(self, name: str) -> str:
        """
        Look up the id of the table called ``name``.

        :raises ~boltic_sdk.core.errors.ValidationError: If the table does not
            exist or the lookup fails.
        """
        result = await self._find_table(name)
        if not result.ok or not result.data:
            raise ValidationError(
                "Table not found",
                subcode=ec.VALIDATION_TABLE_NOT_FOUND,
                errors=[{"field": "table", "message": f"Table '{name}' not found in current database"}],
                context={"lookup_error": result.error} if result.error else None,
            )
        return str(result.data["id"])
