"""PEG grammar for RFC 4512 schema descriptions

Three productions are tried in order against the input: attribute type, object class, LDAP syntax. The first one to
consume the whole input wins. :class:`RawRecordVisitor` turns its parse tree into a raw record, a plain dict of field
tags wrapped in a namedtuple naming the production. Raw records are checked and converted to typed definitions by
:mod:`ldapschema.validation`.

A failed parse reports the furthest position reached and the rule that failed there::

    Expected ")" but "x" found.
"""

from . import rfc4512
from .attributetype import SyntaxSpec
from .exceptions import ErrorType, GrammarSyntaxError, Position, SchemaParseError
from .utils import line_column, unescape_qdstring

from collections import namedtuple
import logging
import re

from parsimonious.exceptions import BadGrammar, ParseError, VisitationError
from parsimonious.grammar import Grammar
from parsimonious.nodes import NodeVisitor

logger = logging.getLogger(__name__)

RawAttributeType = namedtuple('RawAttributeType', ['fields'])
RawObjectClass = namedtuple('RawObjectClass', ['fields'])
RawLdapSyntax = namedtuple('RawLdapSyntax', ['fields'])

END_OF_INPUT = 'end of input'

_production_rules = '''
      definition           = _ (attribute_type / object_class / ldap_syntax)

      attribute_type       = lparen oid names desc? obsolete? at_sup? equality? ordering? substr? syntax?
                             single_value? collective? no_user_modification? usage? extension* rparen eof
      object_class         = lparen oid names oc_element* rparen eof
      ldap_syntax          = lparen oid desc? extension* rparen eof

      oc_element           = desc / obsolete / oc_sup / kind / must / may / extension

      names                = {NAME} qdescrs
      desc                 = {DESC} qdstring
      obsolete             = {OBSOLETE}
      at_sup               = {SUP} word
      oc_sup               = {SUP} oids
      kind                 = {KIND}
      must                 = {MUST} oids
      may                  = {MAY} oids
      equality             = {EQUALITY} word
      ordering             = {ORDERING} word
      substr               = {SUBSTR} word
      syntax               = {SYNTAX} noidlen
      single_value         = {SINGLE_VALUE}
      collective           = {COLLECTIVE}
      no_user_modification = {NO_USER_MODIFICATION}
      usage                = {USAGE} usage_value
      extension            = xstring qdstrings

      qdescrs              = qdstring / qdstring_list
      qdstrings            = qdstring / qdstring_list
      qdstring_list        = lparen qdstring* rparen
      oids                 = word / oid_list
      oid_list             = lparen word oid_more* rparen
      oid_more             = dollar word

      word                 = word_token _
      qdstring             = qdstring_token _
      usage_value          = usage_token _
      xstring              = xstring_token _

      lparen               = "(" _
      rparen               = ")" _
      dollar               = "$" _
      eof                  = !~r"[\\s\\S]"
'''

_strict_oid_rules = '''
      oid                  = numeric_oid _
      noidlen              = syntax_name_oid len? _
'''

# OpenLDAP cn=config OIDs are tried before the plain forms
_relaxed_oid_rules = '''
      oid                  = (vendor_oid / numeric_oid) _
      noidlen              = (vendor_oid / syntax_name_oid) len? _
'''

_token_patterns = (
    ('numeric_oid', rfc4512.numericoid_token + rfc4512.word_boundary),
    ('vendor_oid', rfc4512.vendor_oid_token + rfc4512.word_boundary),
    ('syntax_name_oid', rfc4512.syntax_oid_token + rfc4512.word_boundary),
    ('word_token', rfc4512.word_token),
    ('qdstring_token', rfc4512.qdstring),
    ('len', rfc4512.len_token),
    ('usage_token', rfc4512.usage_token),
    ('xstring_token', rfc4512.xstring_token),
    ('_', rfc4512.WSP),
)


def _quote(s):
    return '"{0}"'.format(s)


def _keyword_expr(pattern):
    return '~r"{0}" _'.format(pattern)


def grammar_rules(relaxed_mode=False):
    """Build the grammar text for one dialect

    :param bool relaxed_mode: Accept OpenLDAP ``OLcfg*`` OIDs wherever an OID is allowed
    :rtype: str
    """
    keywords = {}
    for kw in rfc4512.keywords:
        keywords[kw.replace('-', '_')] = _keyword_expr(rfc4512.keyword_token(kw))
    keywords['KIND'] = _keyword_expr('(?:' + '|'.join(rfc4512.kinds) + ')' + rfc4512.word_boundary)

    rules = [_production_rules.format(**keywords)]
    if relaxed_mode:
        rules.append(_relaxed_oid_rules)
    else:
        rules.append(_strict_oid_rules)
    for name, pattern in _token_patterns:
        rules.append('      {0} = ~r"{1}"\n'.format(name, pattern))
    return ''.join(rules)


# rule name -> description used in syntax error messages
_labels = {
    'definition': 'schema definition',
    'attribute_type': _quote('('),
    'object_class': _quote('('),
    'ldap_syntax': _quote('('),
    'lparen': _quote('('),
    'rparen': _quote(')'),
    'dollar': _quote('$'),
    'eof': END_OF_INPUT,
    'oid': 'OID',
    'numeric_oid': 'OID',
    'vendor_oid': 'OID',
    'names': _quote('NAME'),
    'qdescrs': 'quoted string',
    'qdstrings': 'quoted string',
    'qdstring': 'quoted string',
    'qdstring_token': 'quoted string',
    'qdstring_list': 'quoted string',
    'word': 'name',
    'word_token': 'name',
    'oids': 'name',
    'oid_list': 'name',
    'oid_more': _quote('$'),
    'noidlen': 'syntax OID',
    'syntax_name_oid': 'syntax OID',
    'len': 'length',
    'usage_value': 'usage',
    'usage_token': 'usage',
    'extension': 'extension name',
    'xstring': 'extension name',
    'xstring_token': 'extension name',
    'oc_element': 'object class element',
    'kind': 'object class kind',
    'desc': _quote('DESC'),
    'obsolete': _quote('OBSOLETE'),
    'at_sup': _quote('SUP'),
    'oc_sup': _quote('SUP'),
    'must': _quote('MUST'),
    'may': _quote('MAY'),
    'equality': _quote('EQUALITY'),
    'ordering': _quote('ORDERING'),
    'substr': _quote('SUBSTR'),
    'syntax': _quote('SYNTAX'),
    'single_value': _quote('SINGLE-VALUE'),
    'collective': _quote('COLLECTIVE'),
    'no_user_modification': _quote('NO-USER-MODIFICATION'),
    'usage': _quote('USAGE'),
}


def _found(text, pos):
    if pos >= len(text):
        return None
    return text[pos]


def _describe_found(found):
    if found is None:
        return END_OF_INPUT
    return _quote(found)


def _syntax_error(e):
    """Convert a parsimonious failure into a :class:`.GrammarSyntaxError`"""
    name = getattr(e.expr, 'name', '') or 'definition'
    label = _labels.get(name, name)
    found = _found(e.text, e.pos)
    message = 'Expected {0} but {1} found.'.format(label, _describe_found(found))
    return GrammarSyntaxError(message, Position(e.line(), e.column(), e.pos), (label,), found)


_Field = namedtuple('_Field', ['tag', 'value', 'start'])


def _flatten(children):
    for child in children:
        if isinstance(child, list):
            for item in _flatten(child):
                yield item
        else:
            yield child


def _strings(children):
    return [item for item in _flatten(children) if isinstance(item, str)]


class RawRecordVisitor(NodeVisitor):
    """Builds a raw record from the parse tree of a matched definition

    Element rules return :class:`_Field` tuples which the production methods collect into the record's fields.
    """
    unwrapped_exceptions = (GrammarSyntaxError,)

    def generic_visit(self, node, visited_children):
        return visited_children or node

    ## productions

    def visit_definition(self, node, visited_children):
        for item in _flatten(visited_children):
            if isinstance(item, (RawAttributeType, RawObjectClass, RawLdapSyntax)):
                return item

    def visit_attribute_type(self, node, visited_children):
        return RawAttributeType(self._fields(node, visited_children))

    def visit_object_class(self, node, visited_children):
        return RawObjectClass(self._fields(node, visited_children, repeatable=('kind',)))

    def visit_ldap_syntax(self, node, visited_children):
        return RawLdapSyntax(self._fields(node, visited_children))

    def _fields(self, node, visited_children, repeatable=()):
        fields = {}
        for field in _flatten(visited_children):
            if not isinstance(field, _Field):
                continue
            if field.tag == 'extensions':
                key, value = field.value
                fields.setdefault('extensions', {})[key] = value
            elif field.tag in repeatable:
                fields.setdefault(field.tag, []).append(field.value)
            elif field.tag in fields:
                raise self._repeated_element(node.full_text, field)
            else:
                fields[field.tag] = field.value
        return fields

    def _repeated_element(self, text, field):
        line, column = line_column(text, field.start)
        keyword = field.tag.replace('_', '-').upper()
        found = _found(text, field.start)
        return GrammarSyntaxError('Expected ")" but repeated {0} found.'.format(_quote(keyword)),
                                  Position(line, column, field.start), (_quote(')'),), found)

    ## elements

    def visit_oid(self, node, visited_children):
        return _Field('oid', node.text.strip(), node.start)

    def visit_names(self, node, visited_children):
        names = _strings(visited_children)
        if not names:
            return _Field('name', None, node.start)
        if len(names) > 1:
            logger.debug('Ignoring additional names {0} of {1}'.format(', '.join(names[1:]), names[0]))
        return _Field('name', names[0], node.start)

    def visit_desc(self, node, visited_children):
        return _Field('desc', _strings(visited_children)[0], node.start)

    def visit_at_sup(self, node, visited_children):
        return _Field('sup', _strings(visited_children)[0], node.start)

    def visit_oc_sup(self, node, visited_children):
        return _Field('sup', _strings(visited_children), node.start)

    def visit_kind(self, node, visited_children):
        return _Field('kind', node.text.strip(), node.start)

    def visit_must(self, node, visited_children):
        return _Field('must', _strings(visited_children), node.start)

    def visit_may(self, node, visited_children):
        return _Field('may', _strings(visited_children), node.start)

    def visit_equality(self, node, visited_children):
        return _Field('equality', _strings(visited_children)[0], node.start)

    def visit_ordering(self, node, visited_children):
        return _Field('ordering', _strings(visited_children)[0], node.start)

    def visit_substr(self, node, visited_children):
        return _Field('substr', _strings(visited_children)[0], node.start)

    def visit_syntax(self, node, visited_children):
        for item in _flatten(visited_children):
            if isinstance(item, SyntaxSpec):
                return _Field('syntax', item, node.start)

    def visit_usage(self, node, visited_children):
        return _Field('usage', _strings(visited_children)[0], node.start)

    def visit_extension(self, node, visited_children):
        key, value = visited_children
        return _Field('extensions', (key, value), node.start)

    def visit_obsolete(self, node, visited_children):
        return _Field('obsolete', True, node.start)

    def visit_single_value(self, node, visited_children):
        return _Field('single_value', True, node.start)

    def visit_collective(self, node, visited_children):
        return _Field('collective', True, node.start)

    def visit_no_user_modification(self, node, visited_children):
        return _Field('no_user_modification', True, node.start)

    ## values

    def visit_noidlen(self, node, visited_children):
        oid = None
        length = None
        for item in _flatten(visited_children):
            if isinstance(item, str) and oid is None:
                oid = item
            elif isinstance(item, int):
                length = item
        return SyntaxSpec(oid, length)

    def visit_syntax_name_oid(self, node, visited_children):
        return node.text

    def visit_vendor_oid(self, node, visited_children):
        return node.text

    def visit_len(self, node, visited_children):
        return int(node.text[1:-1])

    def visit_qdstrings(self, node, visited_children):
        return ' '.join(_strings(visited_children))

    def visit_qdstring_list(self, node, visited_children):
        return _strings(visited_children)

    def visit_qdstring(self, node, visited_children):
        return visited_children[0]

    def visit_qdstring_token(self, node, visited_children):
        return unescape_qdstring(node.text[1:-1])

    def visit_oids(self, node, visited_children):
        return _strings(visited_children)

    def visit_word(self, node, visited_children):
        return node.text.strip()

    def visit_usage_value(self, node, visited_children):
        return node.text.strip()

    def visit_xstring(self, node, visited_children):
        return node.text.strip()


class SchemaGrammar(object):
    """Compiled grammar for one dialect.

    :param bool relaxed_mode: Accept OpenLDAP ``OLcfg*`` OIDs wherever an OID is allowed
    :raises SchemaParseError: with ``GRAMMAR_LOAD_ERROR`` type if the grammar cannot be built
    """
    def __init__(self, relaxed_mode=False):
        self.relaxed_mode = relaxed_mode
        try:
            self._grammar = Grammar(self._rules())
        except (ParseError, BadGrammar, VisitationError, re.error) as e:
            raise SchemaParseError.from_error(e, ErrorType.GRAMMAR_LOAD_ERROR, None,
                                              context='Building schema grammar')

    def _rules(self):
        return grammar_rules(self.relaxed_mode)

    def parse(self, text, start=0, end=None):
        """Recognize one schema description.

        :param str text: The full input. Positions in errors are relative to it.
        :param int start: Offset where the description begins
        :param int end: Offset where the description ends, defaults to the end of ``text``
        :return: The raw field record of the first production that matched
        :rtype: RawAttributeType or RawObjectClass or RawLdapSyntax
        :raises GrammarSyntaxError: if no production matches
        """
        if end is not None:
            text = text[:end]
        try:
            tree = self._grammar.parse(text, pos=start)
        except ParseError as e:
            raise _syntax_error(e)
        record = RawRecordVisitor().visit(tree)
        logger.debug('Matched {0} production'.format(type(record).__name__))
        return record
