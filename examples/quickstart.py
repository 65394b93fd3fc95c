# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Boltic SDK quickstart.

Creates a table, adds a column, lists both and cleans up. Reads the API key from
the ``BOLTIC_API_KEY`` environment variable; ``BOLTIC_ENV`` selects the
deployment (default ``sit``).
"""

import asyncio
import logging
import os
import sys

from boltic_sdk import BolticError, create_client


async def main() -> None:
    api_key = os.environ.get("BOLTIC_API_KEY")
    if not api_key:
        print("Set BOLTIC_API_KEY first.")
        sys.exit(1)

    logging.basicConfig(level=logging.INFO)

    async with create_client(api_key, environment=os.environ.get("BOLTIC_ENV", "sit"), debug=True) as client:

        def tag(request):
            request.headers["x-request-source"] = "quickstart"
            return request

        client.add_request_interceptor(tag)
        client.add_response_interceptor(on_error=lambda err: print({"failed": str(err)}))

        created = await client.tables.create(
            {
                "name": "quickstart_items",
                "description": "Created by the quickstart",
                "fields": [{"name": "title", "type": "text"}],
            }
        )
        print({"create": created.data or created.error})
        if not created.ok:
            return

        try:
            await client.columns.create("quickstart_items", {"name": "price", "type": "currency"})
            columns = await client.columns.find_all("quickstart_items")
            print({"columns": [c.get("name") for c in columns.data or []]})

            tables = await client.tables.find_all({"where": {"name": "quickstart_items"}, "limit": 5})
            print({"tables": tables.data, "pagination": tables.pagination})
        except BolticError as exc:
            print({"error": exc.to_dict()})
        finally:
            deleted = await client.tables.delete("quickstart_items")
            print({"delete": "ok" if deleted.ok else deleted.error})


if __name__ == "__main__":
    asyncio.run(main())
