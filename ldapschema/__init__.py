"""Imports and defines the core of the public API"""

from .attributetype import AttributeTypeDefinition, SyntaxSpec
from .config import ParserConfig, DEFAULT_CONFIG
from .constants import ObjectClassKind, AttributeUsage, DefinitionType, RESERVED_KEYWORDS
from .exceptions import SchemaError, SchemaParseError, GrammarSyntaxError, LdifError, ErrorType, Position
from .ldapsyntax import LdapSyntaxDefinition
from .objectclass import ObjectClassDefinition
from .parser import SchemaParser, parse, parse_many, is_valid, extract_oid, extract_name

__all__ = [
    'AttributeTypeDefinition',
    'SyntaxSpec',
    'ParserConfig',
    'DEFAULT_CONFIG',
    'ObjectClassKind',
    'AttributeUsage',
    'DefinitionType',
    'RESERVED_KEYWORDS',
    'SchemaError',
    'SchemaParseError',
    'GrammarSyntaxError',
    'LdifError',
    'ErrorType',
    'Position',
    'LdapSyntaxDefinition',
    'ObjectClassDefinition',
    'SchemaParser',
    'parse',
    'parse_many',
    'is_valid',
    'extract_oid',
    'extract_name',
]
