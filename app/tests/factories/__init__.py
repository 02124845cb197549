"""Test data factories for deterministic test data generation."""

from tests.factories.docstore import (
    make_exists_error,
    make_multi_get_response,
    make_node_data,
    make_not_found_error,
    make_temporary_error,
)

__all__ = [
    "make_exists_error",
    "make_multi_get_response",
    "make_node_data",
    "make_not_found_error",
    "make_temporary_error",
]
