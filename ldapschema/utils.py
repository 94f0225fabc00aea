import re

_re_qdstring_escape = re.compile(r'\\(27|5[Cc])')


def re_anchor(r):
    return r'^' + r + r'$'


def unescape_qdstring(s):
    """Decode the RFC 4512 escapes ``\\27`` and ``\\5C`` inside a quoted string body"""
    return _re_qdstring_escape.sub(lambda m: chr(int(m.group(1), 16)), s)


def line_column(text, offset):
    """Convert a 0-based character offset into a 1-based (line, column) pair"""
    line = text.count('\n', 0, offset) + 1
    line_start = text.rfind('\n', 0, offset) + 1
    return line, offset - line_start + 1


def unique(items):
    """Drop repeated items while keeping first-seen order"""
    seen = set()
    ret = []
    for item in items:
        if item not in seen:
            seen.add(item)
            ret.append(item)
    return ret


def preview(s, length=100):
    if len(s) > length:
        return s[:length] + '...'
    return s
