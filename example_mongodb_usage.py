"""
Example usage of docframe with MongoDB.

Runs a small batch of queries against a live deployment and prints each
resulting frame.
"""

import os

from dotenv import load_dotenv

from docframe import DataSourceSettings, MongoDataSource
from docframe.core.context import QueryContext
from docframe.core.models import DataQuery, HealthStatus

load_dotenv()

DEFAULT_COLLECTION = os.getenv("MONGO_COLLECTION", "transactions")


def print_frame(ref_id, response):
    print("\n" + "=" * 80)
    print(f"QUERY {ref_id}: {response.status.value}")
    print("=" * 80)

    if not response.ok:
        print(f"Error: {response.error}")
        return

    frame = response.frames[0]
    print(f"Columns ({len(frame.fields)}): {frame.field_names}")
    print(f"Rows: {frame.row_count}")
    for row in list(frame.rows())[:5]:
        print(f"  {row}")


def main():
    settings = DataSourceSettings.from_env()

    with MongoDataSource.from_settings(settings) as datasource:
        health = datasource.check_health()
        print(f"Health: {health.status.value} - {health.message}")
        if health.status != HealthStatus.OK:
            return

        queries = [
            DataQuery(
                ref_id="large",
                payload={
                    "queryText": """
                    {
                        // large transactions only
                        "amount": {"$gt": 1000} /* USD */
                    }
                    """,
                    "collection": DEFAULT_COLLECTION,
                },
            ),
            DataQuery(
                ref_id="by-id",
                payload={
                    "queryText": '{"_id": {"$oid": "64b7f0c2a1b2c3d4e5f60718"}}',
                    "collection": DEFAULT_COLLECTION,
                },
            ),
            DataQuery(
                ref_id="broken",
                payload={"queryText": "{amount: >", "collection": DEFAULT_COLLECTION},
            ),
        ]

        # A cancelled context only affects its own query
        cancelled = QueryContext()
        cancelled.cancel()
        queries.append(
            DataQuery(ref_id="cancelled", payload={"queryText": "{}", "collection": DEFAULT_COLLECTION})
        )

        responses = datasource.query_data(queries, contexts={"cancelled": cancelled})
        for ref_id, response in responses.items():
            print_frame(ref_id, response)


if __name__ == "__main__":
    main()
