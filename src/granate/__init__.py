from granate.logger import get_logger

__author__ = """Granate contributors"""
__version__ = "0.3.0"

log = get_logger("granate")

from granate.execution import build_schema_and_context, granate, granate_sync  # noqa: E402

__all__ = ["build_schema_and_context", "granate", "granate_sync", "log"]
