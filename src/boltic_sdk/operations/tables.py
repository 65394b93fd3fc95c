# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Table operations namespace for the Boltic SDK."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Union

from ..common.constants import TABLE_PATH, TABLES_BASE_PATH
from ..core import _error_codes as ec
from ..core.errors import ValidationError
from ..core.results import ApiResponse
from ._base import _ResourceOperations, _items, _require_where, build_endpoint_path, build_query_params

__all__ = ["TableOperations"]


class TableOperations(_ResourceOperations):
    """Namespace for table operations.

    Accessed via ``client.tables``. Every method is a coroutine returning an
    :class:`~boltic_sdk.core.results.ApiResponse`; HTTP failures are reported in
    ``ApiResponse.error`` rather than raised. When a database has been selected
    with ``client.use_database(...)`` its id is attached to every call.

    :param client: The parent :class:`~boltic_sdk.client.BolticClient` instance.
    :type client: ~boltic_sdk.client.BolticClient

    Example::

        client = create_client(api_key, environment="sit")

        created = await client.tables.create(
            {"name": "products", "fields": [{"name": "title", "type": "text"}]}
        )
        tables = await client.tables.find_all({"limit": 20})
        await client.tables.rename("products", "catalog")
        await client.tables.delete("catalog")
    """

    # ----------------------------------------------------------------- create

    async def create(self, data: Mapping[str, Any]) -> ApiResponse:
        """Create a table.

        :param data: Table definition. Requires ``name`` (or ``table_name``);
            typically also ``description`` and a ``fields`` list.
        :type data: dict
        :return: The created table record.
        :rtype: ~boltic_sdk.core.results.ApiResponse

        :raises ~boltic_sdk.core.errors.ValidationError: If no table name is given.
        """
        name = data.get("name") or data.get("table_name")
        if not isinstance(name, str) or not name.strip():
            raise ValidationError(
                "Table creation validation failed",
                subcode=ec.VALIDATION_TABLE_NAME_REQUIRED,
                errors=[{"field": "name", "message": "Table name is required"}],
            )
        body: Dict[str, Any] = dict(data)
        database_id = self._database_id()
        if database_id:
            body.setdefault("database_id", database_id)
        return await self._request("POST", TABLES_BASE_PATH, data=body)

    # ------------------------------------------------------------------- read

    async def find_all(self, options: Optional[Mapping[str, Any]] = None) -> ApiResponse:
        """List tables with optional ``where``, ``fields``, ``sort``, ``limit`` and ``offset``.

        :return: A list of table records and pagination info.
        :rtype: ~boltic_sdk.core.results.ApiResponse
        """
        params = self._with_database_params(build_query_params(options))
        result = await self._request("GET", TABLES_BASE_PATH, params=params)
        if not result.ok:
            return result
        return ApiResponse(data=_items(result.data, "tables"), pagination=result.pagination)

    async def find_one(self, options: Mapping[str, Any]) -> ApiResponse:
        """Return the first table matching ``options["where"]``, or ``data=None``.

        :raises ~boltic_sdk.core.errors.ValidationError: If ``where`` is missing or empty.
        """
        where = _require_where(options, "find_one")
        params = self._with_database_params(build_query_params({**options, "where": where, "limit": 1}))
        result = await self._request("GET", TABLES_BASE_PATH, params=params)
        if not result.ok:
            return result
        tables = _items(result.data, "tables")
        return ApiResponse(data=tables[0] if tables else None)

    async def get_metadata(self, name: str) -> ApiResponse:
        """Return the record (including schema) of the table called ``name``.

        :raises ~boltic_sdk.core.errors.ValidationError: If the table does not exist.
        """
        result = await self._find_table(name)
        if result.ok and result.data is None:
            raise ValidationError(
                "Table not found",
                subcode=ec.VALIDATION_TABLE_NOT_FOUND,
                errors=[{"field": "table_name", "message": f"Table '{name}' not found"}],
            )
        return result

    # ----------------------------------------------------------------- update

    async def update(self, name: str, data: Mapping[str, Any]) -> ApiResponse:
        """Update the table called ``name`` with the fields in ``data``.

        :raises ~boltic_sdk.core.errors.ValidationError: If the table does not
            exist or ``data["name"]`` is blank.
        """
        if "name" in data and (not isinstance(data["name"], str) or not data["name"].strip()):
            raise ValidationError(
                "Table update validation failed",
                subcode=ec.VALIDATION_TABLE_NAME_REQUIRED,
                errors=[{"field": "name", "message": "Table name cannot be empty"}],
            )
        table_id = await self._resolve_table_id(name)
        path = build_endpoint_path(TABLE_PATH, table_id=table_id)
        return await self._request("PATCH", path, data=dict(data))

    async def rename(self, old_name: str, new_name: str) -> ApiResponse:
        return await self.update(old_name, {"name": new_name})

    async def set_access(self, table_name: str, is_shared: bool) -> ApiResponse:
        """Share or unshare a table."""
        return await self.update(table_name, {"is_shared": is_shared})

    # ----------------------------------------------------------------- delete

    async def delete(self, table: Union[str, Mapping[str, Any]]) -> ApiResponse:
        """Delete a table by name, or by ``{"where": {"id": ...}}`` / ``{"where": {"name": ...}}``.

        .. warning::
            This operation is irreversible and deletes all records in the table.

        :raises ~boltic_sdk.core.errors.ValidationError: If the table cannot be resolved.
        """
        if isinstance(table, str):
            table_id = await self._resolve_table_id(table)
        else:
            where = _require_where(table, "delete")
            if where.get("id"):
                table_id = str(where["id"])
            elif where.get("name"):
                table_id = await self._resolve_table_id(where["name"])
            else:
                raise ValidationError(
                    "Table not found for deletion",
                    subcode=ec.VALIDATION_TABLE_NOT_FOUND,
                    errors=[{"field": "identifier", "message": "Could not resolve table identifier"}],
                )
        path = build_endpoint_path(TABLE_PATH, table_id=table_id)
        return await self._request("DELETE", path)
