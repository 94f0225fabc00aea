from .constants import DefinitionType

from collections import namedtuple

_ObjectClassDefinition = namedtuple('ObjectClassDefinition', [
    'oid',
    'name',
    'desc',
    'sup',
    'kind',
    'must',
    'may',
    'extensions',
])


class ObjectClassDefinition(_ObjectClassDefinition):
    """A parsed and validated LDAP object class definition (RFC 4512 section 4.1.1).

    Instances are created by :meth:`.SchemaParser.parse` and are never modified afterwards.

    :var str oid: The OID, dotted decimal or (relaxed mode) an OpenLDAP ``OLcfg*`` OID
    :var str name: The first specified name. Additional aliases are not kept.
    :var str desc: The description, or None
    :var tuple(str) sup: All superior object class names, or None. Always a tuple, even for one superior.
    :var str kind: One of `ABSTRACT`, `STRUCTURAL`, or `AUXILIARY`
    :var tuple(str) must: Required attribute type names in specified order, or None
    :var tuple(str) may: Allowed attribute type names in specified order, or None
    :var dict extensions: ``X-`` extension values keyed by extension name, or None
    """
    __slots__ = ()

    type = DefinitionType.OBJECT_CLASS

    def to_dict(self):
        """Plain dict view suitable for JSON output"""
        return {
            'type': self.type,
            'oid': self.oid,
            'name': self.name,
            'desc': self.desc,
            'sup': _list_or_none(self.sup),
            'kind': self.kind,
            'must': _list_or_none(self.must),
            'may': _list_or_none(self.may),
            'extensions': _dict_or_none(self.extensions),
        }

    def __repr__(self):
        return '<{0} "{1}">'.format(self.__class__.__name__, self.name)


def _list_or_none(value):
    if value is None:
        return None
    return list(value)


def _dict_or_none(value):
    if value is None:
        return None
    return dict(value)
