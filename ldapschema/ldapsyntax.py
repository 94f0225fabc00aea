from .constants import DefinitionType
from .objectclass import _dict_or_none

from collections import namedtuple

_LdapSyntaxDefinition = namedtuple('LdapSyntaxDefinition', ['oid', 'desc', 'extensions'])


class LdapSyntaxDefinition(_LdapSyntaxDefinition):
    """A parsed LDAP syntax description, as found in ``ldapSyntaxes`` / ``olcLdapSyntaxes`` values.

    :var str oid: The syntax OID
    :var str desc: The description, or None
    :var dict extensions: ``X-`` extension values keyed by extension name, or None
    """
    __slots__ = ()

    type = DefinitionType.LDAP_SYNTAX

    # syntaxes have no NAME; lets callers treat all definitions alike
    name = None

    def to_dict(self):
        return {
            'type': self.type,
            'oid': self.oid,
            'desc': self.desc,
            'extensions': _dict_or_none(self.extensions),
        }

    def __repr__(self):
        return '<{0} {1}>'.format(self.__class__.__name__, self.oid)
