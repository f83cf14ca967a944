"""Tests for the MongoDB query executor."""

import time

import pytest
from pymongo.errors import AutoReconnect, ExecutionTimeout, OperationFailure

from docframe.adapters.mongodb.executor import MongoQueryExecutor
from docframe.core.context import QueryContext
from docframe.core.errors import QueryCancelled, QueryExecutionError, ResultReadError
from docframe.core.models import QueryDescriptor

ORDERS = QueryDescriptor(filter_text="{}", database="shop", collection="orders")


@pytest.fixture
def client(fake_store):
    fake_store.add("shop", "orders", [{"n": 1}, {"n": 2}, {"n": 3}])
    return fake_store.client_factory("mongodb://h")


def test_find_all_returns_documents_in_store_order(fake_store, client):
    documents = MongoQueryExecutor().find_all(client, ORDERS, {"n": {"$gt": 0}})

    assert documents == [{"n": 1}, {"n": 2}, {"n": 3}]
    assert fake_store.filters == [{"n": {"$gt": 0}}]
    assert fake_store.cursors[0].closed


def test_find_all_with_deadline(fake_store, client):
    documents = MongoQueryExecutor().find_all(client, ORDERS, {}, QueryContext(timeout=30))

    assert len(documents) == 3


def test_missing_collection_is_an_execution_error(fake_store, client):
    descriptor = QueryDescriptor(database="shop", collection="nope")

    with pytest.raises(QueryExecutionError) as excinfo:
        MongoQueryExecutor().find_all(client, descriptor, {})

    assert "does not exist" in excinfo.value.message
    assert fake_store.filters == []


def test_missing_collection_allowed_when_not_required(fake_store, client):
    descriptor = QueryDescriptor(database="shop", collection="nope")

    documents = MongoQueryExecutor(require_existing_collection=False).find_all(
        client, descriptor, {}
    )

    assert documents == []


def test_rejected_filter_is_an_execution_error(fake_store, client):
    fake_store.find_error = OperationFailure("unknown operator: $bogus", code=2)

    with pytest.raises(QueryExecutionError) as excinfo:
        MongoQueryExecutor().find_all(client, ORDERS, {"$bogus": 1})

    assert excinfo.value.message.startswith("MongoDB find error: ")


def test_failure_before_first_document_is_an_execution_error(fake_store, client):
    fake_store.cursor_error = OperationFailure("bad query", code=2)
    fake_store.fail_after = 0

    with pytest.raises(QueryExecutionError):
        MongoQueryExecutor().find_all(client, ORDERS, {})

    assert fake_store.cursors[0].closed


def test_failure_while_draining_is_a_read_error(fake_store, client):
    fake_store.cursor_error = AutoReconnect("connection reset")
    fake_store.fail_after = 2

    with pytest.raises(ResultReadError) as excinfo:
        MongoQueryExecutor().find_all(client, ORDERS, {})

    assert excinfo.value.message.startswith("cursor all error: ")
    assert fake_store.cursors[0].closed


def test_cancelled_context_stops_before_find(fake_store, client):
    context = QueryContext()
    context.cancel()

    with pytest.raises(QueryCancelled):
        MongoQueryExecutor().find_all(client, ORDERS, {}, context)

    assert fake_store.filters == []


def test_cancellation_while_draining(fake_store, client):
    context = QueryContext()
    fake_store.on_document = lambda document: context.cancel()

    with pytest.raises(QueryCancelled):
        MongoQueryExecutor().find_all(client, ORDERS, {}, context)

    assert fake_store.cursors[0].closed


def expire(context):
    context.deadline = time.monotonic() - 1


def test_timeout_after_deadline_expired_is_a_cancellation(fake_store, client):
    context = QueryContext(timeout=30)
    fake_store.on_find = lambda: expire(context)
    fake_store.find_error = ExecutionTimeout("operation exceeded time limit", code=50)

    with pytest.raises(QueryCancelled):
        MongoQueryExecutor().find_all(client, ORDERS, {}, context)


def test_timeout_with_far_deadline_is_an_execution_error(fake_store, client):
    context = QueryContext(timeout=300)
    fake_store.find_error = ExecutionTimeout("operation exceeded time limit", code=50)

    with pytest.raises(QueryExecutionError):
        MongoQueryExecutor().find_all(client, ORDERS, {}, context)


def test_rejection_finishing_after_deadline_is_not_a_cancellation(fake_store, client):
    context = QueryContext(timeout=30)
    fake_store.on_find = lambda: expire(context)
    fake_store.find_error = OperationFailure("unknown operator: $bogus", code=2)

    with pytest.raises(QueryExecutionError):
        MongoQueryExecutor().find_all(client, ORDERS, {"$bogus": 1}, context)
