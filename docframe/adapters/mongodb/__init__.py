"""MongoDB adapter."""

from docframe.adapters.mongodb.uri import generate_mongo_uri
from docframe.adapters.mongodb.connector import MongoStoreConnector
from docframe.adapters.mongodb.pool import ClientPool
from docframe.adapters.mongodb.executor import MongoQueryExecutor

__all__ = ["generate_mongo_uri", "MongoStoreConnector", "ClientPool", "MongoQueryExecutor"]
