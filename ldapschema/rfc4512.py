"""Translations of ABNF specs to regex from RFC 4512

https://tools.ietf.org/html/rfc4512

The strict forms follow the RFC. The ``*_token`` forms are the lenient
regex tokens used by the parsimonious grammar; anything they admit beyond the
RFC is rejected later by the validator with a more precise diagnostic.
"""

ALPHA = r'[A-Za-z]'
DIGIT = r'[0-9]'

WSP = r'\s*'

keychar = r'[A-Za-z0-9-]'  # ALPHA / DIGIT / HYPHEN
keystring = ALPHA + keychar + r'*'

numericoid = DIGIT + r'+(?:\.' + DIGIT + r'+)*'
descr = keystring

QQ = r'\\27'
QS = r'\\5[Cc]'
QUTF8 = r"[^'\\]"

dstring = r'(?:' + QS + r'|' + QQ + r'|' + QUTF8 + r')*'
qdstring = r"'(?P<value>" + dstring + r")'"

xstring = r'X-[A-Z0-9-]+'

# schema element names as accepted in NAME-adjacent positions (SUP, MUST, MAY)
attribute_name = ALPHA + r'[A-Za-z0-9_-]*'

# OpenLDAP cn=config OIDs, e.g. OLcfgOvAt:18.1
vendor_oid_prefix = r'OLcfg(?:Ov|Db|Gl)(?:At|Oc)'
vendor_oid = vendor_oid_prefix + r':' + numericoid
vendor_oid_search = r'\b' + vendor_oid_prefix + r':[0-9.]+\b'

ordinal_prefix = r'\s*\{[0-9]+\}\s*'

## lexical tokens used by the grammar

word_boundary = r'(?![A-Za-z0-9_.-])'

numericoid_token = DIGIT + r'[0-9.]*'
vendor_oid_token = vendor_oid_prefix + r':' + DIGIT + r'[0-9.]*'
word_token = r'[A-Za-z0-9][A-Za-z0-9_.-]*'
syntax_oid_token = r'(?:' + numericoid_token + r'|' + descr + r')'
len_token = r'\{(?P<len>' + DIGIT + r'+)\}'
xstring_token = xstring + word_boundary

usages = ('userApplications', 'directoryOperation', 'distributedOperation', 'dSAOperation')
usage_token = r'(?:' + r'|'.join(usages) + r')' + word_boundary

kinds = ('ABSTRACT', 'STRUCTURAL', 'AUXILIARY')

keywords = (
    'NAME',
    'DESC',
    'OBSOLETE',
    'SUP',
    'ABSTRACT',
    'STRUCTURAL',
    'AUXILIARY',
    'MUST',
    'MAY',
    'EQUALITY',
    'ORDERING',
    'SUBSTR',
    'SYNTAX',
    'SINGLE-VALUE',
    'COLLECTIVE',
    'NO-USER-MODIFICATION',
    'USAGE',
)


def keyword_token(kw):
    """Build a token pattern for a keyword that must not run into a following word character"""
    return kw + word_boundary
