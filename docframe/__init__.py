"""
docframe - run MongoDB find queries and flatten the results into frames.

Main entry point for creating data sources.
"""

from docframe.config import DataSourceSettings
from docframe.datasource import MongoDataSource

__all__ = ["DataSourceSettings", "MongoDataSource"]
