# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Column operations namespace for the Boltic SDK."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..common.constants import COLUMN_PATH, COLUMNS_BASE_PATH
from ..core import _error_codes as ec
from ..core.errors import ValidationError
from ..core.results import ApiResponse
from ._base import _ResourceOperations, _items, _require_where, build_endpoint_path, build_query_params
from ._column_rules import apply_column_defaults, validate_column_update

__all__ = ["ColumnOperations"]


class ColumnOperations(_ResourceOperations):
    """Namespace for column (field) operations on an existing table.

    Accessed via ``client.columns``. Tables are addressed by name; the table id
    is looked up before each call.

    Example::

        await client.columns.create("products", {"name": "price", "type": "currency"})
        cols = await client.columns.find_all("products")
        await client.columns.update("products", {"name": "price"}, {"description": "Unit price"})
        await client.columns.delete("products", {"name": "price"})
    """

    async def create(self, table_name: str, column: Mapping[str, Any]) -> ApiResponse:
        """Add a column to ``table_name``.

        Unset flags and type-specific settings are filled with the API
        defaults, and date/time format keys are translated to strftime
        patterns before the call.

        :param column: Field definition; requires ``name`` and ``type``.
        :type column: dict

        :raises ~boltic_sdk.core.errors.ValidationError: If the definition is
            incomplete, the table does not exist, or a column with the same
            name already exists.
        """
        errors: List[Dict[str, str]] = []
        if not column.get("name"):
            errors.append({"field": "name", "message": "Field name is required"})
        if not column.get("type"):
            errors.append({"field": "type", "message": "Field type is required"})
        if errors:
            raise ValidationError("Column validation failed", errors=errors)

        table_id = await self._resolve_table_id(table_name)
        path = build_endpoint_path(COLUMNS_BASE_PATH, table_id=table_id)
        result = await self._request("POST", path, data=apply_column_defaults(column))
        if not result.ok and (result.details or {}).get("status_code") == 409:
            raise ValidationError(
                "Column already exists",
                subcode=ec.VALIDATION_COLUMN_EXISTS,
                errors=[{"field": "columns", "message": "Column already exists in the table"}],
            )
        return result

    async def find_all(self, table_name: str, options: Optional[Mapping[str, Any]] = None) -> ApiResponse:
        table_id = await self._resolve_table_id(table_name)
        path = build_endpoint_path(COLUMNS_BASE_PATH, table_id=table_id)
        result = await self._request("GET", path, params=build_query_params(options))
        if not result.ok:
            return result
        return ApiResponse(data=_items(result.data, "fields", "columns"), pagination=result.pagination)

    async def find_one(self, table_name: str, options: Mapping[str, Any]) -> ApiResponse:
        """Return the first column matching ``options["where"]``, or ``data=None``.

        A ``where`` containing ``id`` fetches the column directly; other
        conditions go through a one-item list call.
        """
        where = _require_where(options, "find_one")
        table_id = await self._resolve_table_id(table_name)
        if where.get("id"):
            path = build_endpoint_path(COLUMN_PATH, table_id=table_id, field_id=where["id"])
            return await self._request("GET", path)

        path = build_endpoint_path(COLUMNS_BASE_PATH, table_id=table_id)
        params = build_query_params({**options, "where": where, "limit": 1})
        result = await self._request("GET", path, params=params)
        if not result.ok:
            return result
        columns = _items(result.data, "fields", "columns")
        return ApiResponse(data=columns[0] if columns else None)

    async def update(self, table_name: str, where: Mapping[str, Any], changes: Mapping[str, Any]) -> ApiResponse:
        """Apply ``changes`` to the column identified by ``where`` (``id`` or ``name``).

        ``changes`` is validated before any request is made.

        :raises ~boltic_sdk.core.errors.ValidationError: If ``changes`` holds
            invalid values, or the table or column cannot be found.
        """
        payload = validate_column_update(changes)
        table_id, column_id = await self._resolve_column(table_name, where, "update")
        path = build_endpoint_path(COLUMN_PATH, table_id=table_id, field_id=column_id)
        return await self._request("PATCH", path, data=payload)

    async def delete(self, table_name: str, where: Mapping[str, Any]) -> ApiResponse:
        table_id, column_id = await self._resolve_column(table_name, where, "delete")
        path = build_endpoint_path(COLUMN_PATH, table_id=table_id, field_id=column_id)
        return await self._request("DELETE", path)

    async def _resolve_column(self, table_name: str, where: Mapping[str, Any], operation: str):
        if where.get("id"):
            return await self._resolve_table_id(table_name), str(where["id"])
        if not where.get("name"):
            raise ValidationError(
                "Column identifier required",
                subcode=ec.VALIDATION_COLUMN_IDENTIFIER_REQUIRED,
                errors=[{"field": "where", "message": f"Column ID or name is required for {operation} operation"}],
            )
        table_id = await self._resolve_table_id(table_name)
        path = build_endpoint_path(COLUMNS_BASE_PATH, table_id=table_id)
        params = build_query_params({"where": {"name": where["name"]}, "limit": 1})
        result = await self._request("GET", path, params=params)
        columns = _items(result.data, "fields", "columns") if result.ok else []
        if not columns:
            raise ValidationError(
                "Column not found",
                subcode=ec.VALIDATION_COLUMN_NOT_FOUND,
                errors=[{"field": "column", "message": f"Column '{where['name']}' not found in table '{table_name}'"}],
            )
        return table_id, str(columns[0]["id"])
