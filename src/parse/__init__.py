"""Parsing utilities for PHP reference extraction."""

from parse.class_refs import extract_class_references
from parse.php import ParseError, parse_php
from parse.route_calls import extract_route_calls
from parse.route_definitions import RouteDefinition, extract_route_definitions
from parse.translation_calls import extract_translation_calls

__all__ = [
    "ParseError",
    "RouteDefinition",
    "extract_class_references",
    "extract_route_calls",
    "extract_route_definitions",
    "extract_translation_calls",
    "parse_php",
]
