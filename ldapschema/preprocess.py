from . import rfc4512
from .exceptions import ErrorType, SchemaParseError

from collections import namedtuple
import logging
import re

logger = logging.getLogger(__name__)

_re_ordinal_prefix = re.compile(rfc4512.ordinal_prefix)
_re_vendor_oid = re.compile(rfc4512.vendor_oid_search)
_re_ws = re.compile(r'\s')

VENDOR_OID_MESSAGE = ('OpenLDAP configuration OIDs are not supported in strict RFC 4512 mode. '
                      'Use relaxed_mode=True to enable support.')

PreparedInput = namedtuple('PreparedInput', ['text', 'start', 'end'])
PreparedInput.__doc__ = """The original input with the bounds of the schema description body inside it.

``text[start:end]`` is the body with any ordinal prefix and surrounding whitespace removed. Syntax error positions
are offsets into ``text``.
"""


def strip_ordinal_prefix(text):
    """Return the offset just past a leading ``{n}`` ordinal marker, or 0 if there is none.

    Only a marker at the very start of the input (after optional whitespace) is recognized.

    :param str text: The raw schema description
    :rtype: int
    """
    m = _re_ordinal_prefix.match(text)
    if m is None:
        return 0
    logger.debug('Stripped ordinal prefix {0}'.format(m.group(0).strip()))
    return m.end()


def prepare(text):
    """Compute the body bounds of a raw schema description

    :param str text: The raw schema description
    :rtype: PreparedInput
    """
    start = strip_ordinal_prefix(text)
    end = len(text)
    while start < end and _re_ws.match(text, start):
        start += 1
    while end > start and _re_ws.match(text, end - 1):
        end -= 1
    return PreparedInput(text, start, end)


def is_empty(prepared):
    return prepared.start >= prepared.end


def find_vendor_oid(prepared):
    """Find the first OpenLDAP ``OLcfg*`` OID in the body

    :param PreparedInput prepared:
    :return: The OID text, or None
    :rtype: str
    """
    m = _re_vendor_oid.search(prepared.text, prepared.start, prepared.end)
    if m is None:
        return None
    return m.group(0)


def check_vendor_oids(prepared, relaxed_mode):
    """Reject OpenLDAP configuration OIDs unless running in relaxed mode

    :param PreparedInput prepared:
    :param bool relaxed_mode:
    :rtype: None
    :raises SchemaParseError: with ``SYNTAX_ERROR`` type in strict mode when a vendor OID is present
    """
    oid = find_vendor_oid(prepared)
    if oid is None:
        return
    if relaxed_mode:
        logger.debug('Accepting OpenLDAP configuration OID {0} in relaxed mode'.format(oid))
        return
    raise SchemaParseError(VENDOR_OID_MESSAGE, ErrorType.SYNTAX_ERROR, prepared.text,
                           context='Found {0}'.format(oid))
