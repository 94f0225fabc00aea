"""Pull schema description values out of LDIF and ``cn=config`` dumps"""

from .exceptions import LdifError

from base64 import b64decode
import binascii
import logging

logger = logging.getLogger(__name__)

SCHEMA_ATTRIBUTES = frozenset((
    'attributetypes',
    'objectclasses',
    'ldapsyntaxes',
    'olcattributetypes',
    'olcobjectclasses',
    'olcldapsyntaxes',
))


def unfold_lines(text):
    """Join LDIF continuation lines and drop comments

    A line beginning with a single space continues the previous line. Comments may be folded too, so the
    continuation lines of a comment are dropped along with it.

    :param str text: LDIF content
    :return: Iterator over logical lines
    """
    current = None
    in_comment = False
    for line in text.splitlines():
        if line.startswith(' '):
            if in_comment:
                continue
            if current is not None:
                current += line[1:]
                continue
        if current is not None:
            yield current
            current = None
        in_comment = line.startswith('#')
        if in_comment:
            continue
        current = line
    if current is not None:
        yield current


def _decode_base64(attr, value):
    try:
        return b64decode(value, validate=True).decode('utf-8')
    except (binascii.Error, UnicodeDecodeError) as e:
        raise LdifError('Invalid base64 value for {0}: {1}'.format(attr, e))


def iter_schema_values(text):
    """Yield every schema description found in an LDIF document

    Values of ``attributeTypes``, ``objectClasses``, ``ldapSyntaxes`` and their ``olc`` counterparts are returned
    in document order. Base64 values (``attr:: ...``) are decoded as UTF-8. Ordinal prefixes are kept.

    :param str text: LDIF content
    :return: Iterator over schema description strings
    :raises LdifError: if a base64 value is malformed or not UTF-8
    """
    for line in unfold_lines(text):
        attr, sep, value = line.partition(':')
        if not sep:
            continue
        attr = attr.strip()
        if attr.lower() not in SCHEMA_ATTRIBUTES:
            continue
        if value.startswith(':'):
            value = _decode_base64(attr, value[1:].strip())
        else:
            value = value.strip()
        logger.debug('Found {0} value'.format(attr))
        yield value
