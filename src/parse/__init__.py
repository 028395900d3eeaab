"""Parsing utilities for PHP sources."""

from parse.declarations import (
    find_interface_declarations,
    find_method_declarations,
    list_interface_anchors,
    list_method_anchors,
    nearest_preceding_interface,
)
from parse.treesitter_refs import extract_name_references

__all__ = [
    "extract_name_references",
    "find_interface_declarations",
    "find_method_declarations",
    "list_interface_anchors",
    "list_method_anchors",
    "nearest_preceding_interface",
]
