from .base import DataSource, DataSourceError
from .supabase import SupabaseDataSource
from .csv_file import CsvDataSource

__all__ = [
    "DataSource",
    "DataSourceError",
    "SupabaseDataSource",
    "CsvDataSource",
]
