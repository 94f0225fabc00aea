from .constants import DefinitionType
from .objectclass import _dict_or_none

from collections import namedtuple

SyntaxSpec = namedtuple('SyntaxSpec', ['oid', 'length'])
SyntaxSpec.__doc__ = """The SYNTAX of an attribute type: the syntax OID and the suggested maximum length, or None."""

_AttributeTypeDefinition = namedtuple('AttributeTypeDefinition', [
    'oid',
    'name',
    'desc',
    'sup',
    'equality',
    'ordering',
    'substr',
    'syntax',
    'single_value',
    'collective',
    'no_user_modification',
    'usage',
    'extensions',
])


class AttributeTypeDefinition(_AttributeTypeDefinition):
    """A parsed and validated LDAP attribute type definition (RFC 4512 section 4.1.2).

    Instances are created by :meth:`.SchemaParser.parse` and are never modified afterwards.

    :var str oid: The OID, dotted decimal or (relaxed mode) an OpenLDAP ``OLcfg*`` OID
    :var str name: The first specified name. Additional aliases are not kept.
    :var str desc: The description, or None
    :var str sup: The name of the superior attribute type, or None. At least one of ``sup`` and ``syntax`` is set.
    :var str equality: The equality matching rule, or None
    :var str ordering: The ordering matching rule, or None
    :var str substr: The substrings matching rule, or None
    :var SyntaxSpec syntax: The syntax OID and optional length, or None. In relaxed mode the OID may be an OpenLDAP
                            syntax name such as ``OMsDirectoryString``.
    :var bool single_value: The attribute may only have one value.
    :var bool collective: The attribute has been marked collective.
    :var bool no_user_modification: The attribute may not be modified by users.
    :var str usage: One of `userApplications`, `directoryOperation`, `distributedOperation`, or `dSAOperation`; None
                    when not specified.
    :var dict extensions: ``X-`` extension values keyed by extension name, or None
    """
    __slots__ = ()

    type = DefinitionType.ATTRIBUTE_TYPE

    def to_dict(self):
        """Plain dict view suitable for JSON output"""
        syntax = None
        if self.syntax is not None:
            syntax = {'oid': self.syntax.oid}
            if self.syntax.length is not None:
                syntax['length'] = self.syntax.length
        return {
            'type': self.type,
            'oid': self.oid,
            'name': self.name,
            'desc': self.desc,
            'sup': self.sup,
            'equality': self.equality,
            'ordering': self.ordering,
            'substr': self.substr,
            'syntax': syntax,
            'singleValue': self.single_value,
            'collective': self.collective,
            'noUserModification': self.no_user_modification,
            'usage': self.usage,
            'extensions': _dict_or_none(self.extensions),
        }

    def __repr__(self):
        return '<{0} "{1}">'.format(self.__class__.__name__, self.name)
