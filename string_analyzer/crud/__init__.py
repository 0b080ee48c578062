from string_analyzer.crud.base import StringStore
from string_analyzer.crud.memory import InMemoryStringStore
from string_analyzer.crud.sql import SQLStringStore

__all__ = ["StringStore", "InMemoryStringStore", "SQLStringStore"]
