"""Semantic checks applied to raw grammar records

The grammar accepts some inputs that RFC 4512 does not allow, such as keywords used as SUP values or OIDs with a
trailing dot. :class:`SchemaValidator` rejects those with a precise error and builds the typed definition.

Checks run in a fixed order and the first failure is raised. Each check is a method taking the raw record and
returning a :class:`.SchemaParseError` or None.
"""

from . import rfc4512
from .attributetype import AttributeTypeDefinition
from .config import DEFAULT_CONFIG
from .constants import ATTRIBUTE_TYPE_KEYWORDS, OBJECT_CLASS_KEYWORDS, RESERVED_KEYWORDS, ObjectClassKind
from .exceptions import ErrorType, SchemaParseError
from .grammar import RawAttributeType, RawLdapSyntax, RawObjectClass
from .ldapsyntax import LdapSyntaxDefinition
from .objectclass import ObjectClassDefinition
from .preprocess import is_empty
from .utils import re_anchor, unique

from types import MappingProxyType
import logging
import re

logger = logging.getLogger(__name__)

_re_numericoid = re.compile(re_anchor(rfc4512.numericoid))
_re_vendor_oid = re.compile(re_anchor(rfc4512.vendor_oid))
_re_attribute_name = re.compile(re_anchor(rfc4512.attribute_name))

_superior_keywords = {
    RawObjectClass: OBJECT_CLASS_KEYWORDS,
    RawAttributeType: ATTRIBUTE_TYPE_KEYWORDS,
    RawLdapSyntax: frozenset(),
}

_variant_labels = {
    RawObjectClass: 'objectClass',
    RawAttributeType: 'attributeType',
    RawLdapSyntax: 'ldapSyntax',
}

_allowed_fields = {
    RawObjectClass: frozenset((
        'oid', 'name', 'desc', 'sup', 'kind', 'must', 'may', 'extensions',
    )),
    RawAttributeType: frozenset((
        'oid', 'name', 'desc', 'sup', 'equality', 'ordering', 'substr', 'syntax', 'single_value', 'collective',
        'no_user_modification', 'usage', 'extensions',
    )),
    RawLdapSyntax: frozenset((
        'oid', 'desc', 'extensions',
    )),
}


def is_reserved_keyword(value, keywords=RESERVED_KEYWORDS):
    """Case-insensitive keyword test

    :param str value:
    :param keywords: Upper case keywords to test against, defaults to every RFC 4512 keyword
    :rtype: bool
    """
    return value.upper() in keywords


def is_valid_attribute_name(value):
    return _re_attribute_name.match(value) is not None


def _as_list(value):
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)


class SchemaValidator(object):
    """Validates raw grammar records against RFC 4512 and builds typed definitions

    :param ParserConfig config: Options; defaults to strict RFC 4512 with no MUST/MAY overlap
    """
    def __init__(self, config=None):
        if config is None:
            config = DEFAULT_CONFIG
        self.config = config
        self._checks = (
            self.check_required_fields,
            self.check_object_class_kind,
            self.check_oid_format,
            self.check_superiors,
            self.check_must_may_overlap,
            self.check_attribute_names,
            self.check_allowed_fields,
            self.check_attribute_type_syntax,
        )

    def _error(self, message, error_type, schema_definition, context=None):
        return SchemaParseError(message, error_type, schema_definition, context=context)

    def check_input(self, prepared):
        """Reject a description with an empty body

        :param PreparedInput prepared: Output of :func:`.preprocess.prepare`
        :raises SchemaParseError: with ``EMPTY_INPUT`` type
        """
        if is_empty(prepared):
            raise SchemaParseError('Schema definition cannot be empty', ErrorType.EMPTY_INPUT, prepared.text)

    def validate(self, raw, schema_definition):
        """Check a raw record and build its typed definition

        :param raw: The grammar result
        :type raw: RawAttributeType or RawObjectClass or RawLdapSyntax
        :param str schema_definition: The original input, attached to any error
        :return: The typed definition
        :raises SchemaParseError: on the first failed check
        """
        if type(raw) not in _variant_labels:
            raise SchemaParseError('Unrecognized grammar result: {0}'.format(type(raw).__name__),
                                   ErrorType.GRAMMAR_ERROR, schema_definition)
        for check in self._checks:
            error = check(raw, schema_definition)
            if error is not None:
                logger.debug('Validation failed: {0}'.format(error.message))
                raise error
        return self._build(raw)

    ## checks

    def check_required_fields(self, raw, schema_definition):
        fields = raw.fields
        if not fields.get('oid'):
            return self._error('Missing OID in schema definition', ErrorType.MISSING_FIELD, schema_definition,
                               'RFC 4512 Section 4.1 - every definition requires a numeric OID')
        if isinstance(raw, RawLdapSyntax):
            return None
        if not fields.get('name'):
            return self._error('Missing NAME in schema definition', ErrorType.MISSING_FIELD, schema_definition,
                               'RFC 4512 Section 4.1 - {0} requires a NAME'.format(_variant_labels[type(raw)]))
        return None

    def check_object_class_kind(self, raw, schema_definition):
        if not isinstance(raw, RawObjectClass):
            return None
        kinds = raw.fields.get('kind') or ()
        if len(kinds) != 1 or kinds[0] not in ObjectClassKind.ALL:
            return self._error('ObjectClass must specify exactly one type: STRUCTURAL, AUXILIARY, or ABSTRACT',
                               ErrorType.OBJECTCLASS_ERROR, schema_definition,
                               'RFC 4512 Section 4.1.1 - ObjectClass type validation')
        return None

    def is_valid_oid(self, oid):
        if _re_numericoid.match(oid):
            return True
        if self.config.relaxed_mode and _re_vendor_oid.match(oid):
            return True
        return False

    def check_oid_format(self, raw, schema_definition):
        oid = raw.fields['oid']
        if self.is_valid_oid(oid):
            return None
        if self.config.relaxed_mode:
            expected = 'a dotted decimal OID or an OpenLDAP OLcfg OID such as OLcfgOvAt:18.1'
        else:
            expected = 'a dotted decimal OID such as 2.5.6.6'
        return self._error('Invalid OID format: {0}. Must follow RFC 4512 numericoid format, {1}'.format(
                           oid, expected), ErrorType.INVALID_OID, schema_definition,
                           'RFC 4512 Section 1.4 - numericoid')

    def check_superiors(self, raw, schema_definition):
        label = _variant_labels[type(raw)]
        for sup in _as_list(raw.fields.get('sup')):
            if is_reserved_keyword(sup, _superior_keywords[type(raw)]):
                return self._error('Invalid SUP value: {0}. SUP should reference a parent {1} name, not a '
                                   'reserved keyword'.format(sup, label), ErrorType.INVALID_FIELD,
                                   schema_definition, 'SUP')
            if not is_valid_attribute_name(sup):
                return self._error('Invalid SUP format: {0}. SUP must be a name starting with a letter and '
                                   'containing only letters, digits, hyphens and underscores'.format(sup),
                                   ErrorType.INVALID_FIELD, schema_definition, 'SUP')
        return None

    def check_must_may_overlap(self, raw, schema_definition):
        if not isinstance(raw, RawObjectClass) or self.config.allow_must_may_overlap:
            return None
        may = set(_as_list(raw.fields.get('may')))
        overlap = unique(attr for attr in _as_list(raw.fields.get('must')) if attr in may)
        if overlap:
            return self._error('Attributes cannot appear in both MUST and MAY: {0}'.format(', '.join(overlap)),
                               ErrorType.VALIDATION_ERROR, schema_definition,
                               'RFC 4512 Section 4.1.1 - MUST and MAY attribute lists')
        return None

    def check_attribute_names(self, raw, schema_definition):
        if not isinstance(raw, RawObjectClass):
            return None
        for tag in ('must', 'may'):
            for attr in _as_list(raw.fields.get(tag)):
                if attr in RESERVED_KEYWORDS:
                    return self._error('Invalid attribute name in {0}: {1}. Attribute names must not be reserved '
                                       'keywords'.format(tag.upper(), attr), ErrorType.INVALID_NAME,
                                       schema_definition, tag.upper())
                if not is_valid_attribute_name(attr):
                    return self._error('Invalid attribute name in {0}: {1}. Attribute names must start with a '
                                       'letter'.format(tag.upper(), attr), ErrorType.INVALID_NAME,
                                       schema_definition, tag.upper())
        return None

    def check_allowed_fields(self, raw, schema_definition):
        allowed = _allowed_fields[type(raw)]
        for key in raw.fields:
            if key not in allowed:
                return self._error('Invalid field in {0} definition: {1}'.format(_variant_labels[type(raw)], key),
                                   ErrorType.INVALID_FIELD, schema_definition, key)
        return None

    def check_attribute_type_syntax(self, raw, schema_definition):
        if not isinstance(raw, RawAttributeType):
            return None
        fields = raw.fields
        syntax = fields.get('syntax')
        if not fields.get('sup') and syntax is None:
            return self._error('AttributeType must have either SUP (superior type) or SYNTAX defined',
                               ErrorType.ATTRIBUTETYPE_ERROR, schema_definition,
                               'RFC 4512 Section 4.1.2 - AttributeType must have SUP or SYNTAX')
        if syntax is not None and not self.config.relaxed_mode and not _re_numericoid.match(syntax.oid):
            return self._error('Invalid SYNTAX OID format: {0}. Must be a numeric OID in strict RFC 4512 '
                               'mode'.format(syntax.oid), ErrorType.INVALID_FIELD, schema_definition, 'SYNTAX')
        return None

    ## construction

    def _build(self, raw):
        fields = raw.fields
        extensions = fields.get('extensions')
        if extensions:
            extensions = MappingProxyType(dict(extensions))
        else:
            extensions = None

        if isinstance(raw, RawObjectClass):
            return ObjectClassDefinition(
                oid=fields['oid'],
                name=fields['name'],
                desc=fields.get('desc'),
                sup=_tuple_or_none(fields.get('sup')),
                kind=fields['kind'][0],
                must=_tuple_or_none(fields.get('must'), dedupe=True),
                may=_tuple_or_none(fields.get('may'), dedupe=True),
                extensions=extensions,
            )
        elif isinstance(raw, RawAttributeType):
            return AttributeTypeDefinition(
                oid=fields['oid'],
                name=fields['name'],
                desc=fields.get('desc'),
                sup=fields.get('sup'),
                equality=fields.get('equality'),
                ordering=fields.get('ordering'),
                substr=fields.get('substr'),
                syntax=fields.get('syntax'),
                single_value=bool(fields.get('single_value', False)),
                collective=bool(fields.get('collective', False)),
                no_user_modification=bool(fields.get('no_user_modification', False)),
                usage=fields.get('usage'),
                extensions=extensions,
            )
        else:
            return LdapSyntaxDefinition(
                oid=fields['oid'],
                desc=fields.get('desc'),
                extensions=extensions,
            )


def _tuple_or_none(value, dedupe=False):
    if value is None:
        return None
    if dedupe:
        value = unique(value)
    return tuple(value)
