"""Global constant classes."""

from . import rfc4512


class ObjectClassKind:
    """Object class kind constants. Exactly one must be given on every object class definition."""
    ABSTRACT = 'ABSTRACT'
    STRUCTURAL = 'STRUCTURAL'
    AUXILIARY = 'AUXILIARY'

    ALL = rfc4512.kinds


class AttributeUsage:
    """Attribute type USAGE constants from RFC 4512 section 4.1.2"""
    USER_APPLICATIONS = 'userApplications'
    DIRECTORY_OPERATION = 'directoryOperation'
    DISTRIBUTED_OPERATION = 'distributedOperation'
    DSA_OPERATION = 'dSAOperation'

    ALL = rfc4512.usages


class DefinitionType:
    """Discriminators used by the ``to_dict()`` views of parsed definitions"""
    OBJECT_CLASS = 'objectClass'
    ATTRIBUTE_TYPE = 'attributeType'
    LDAP_SYNTAX = 'ldapSyntax'


RESERVED_KEYWORDS = frozenset(rfc4512.keywords)

# keywords a SUP value may not name, per definition kind
OBJECT_CLASS_KEYWORDS = frozenset((
    'NAME', 'DESC', 'OBSOLETE', 'ABSTRACT', 'STRUCTURAL', 'AUXILIARY', 'MUST', 'MAY',
))
ATTRIBUTE_TYPE_KEYWORDS = frozenset((
    'EQUALITY', 'ORDERING', 'SUBSTR', 'SYNTAX', 'SINGLE-VALUE', 'COLLECTIVE', 'NO-USER-MODIFICATION', 'USAGE',
))
