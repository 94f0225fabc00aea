from collections import namedtuple

from .utils import preview

Position = namedtuple('Position', ['line', 'column', 'offset'])
Position.__doc__ = """Location of a syntax failure. ``line`` and ``column`` are 1-based, ``offset`` is 0-based."""


class ErrorType:
    """Closed set of error kinds reported by :class:`SchemaParseError`"""
    SYNTAX_ERROR = 'SYNTAX_ERROR'
    GRAMMAR_ERROR = 'GRAMMAR_ERROR'
    MISSING_FIELD = 'MISSING_FIELD'
    INVALID_FIELD = 'INVALID_FIELD'
    INVALID_OID = 'INVALID_OID'
    INVALID_NAME = 'INVALID_NAME'
    VALIDATION_ERROR = 'VALIDATION_ERROR'
    EMPTY_INPUT = 'EMPTY_INPUT'
    OBJECTCLASS_ERROR = 'OBJECTCLASS_ERROR'
    ATTRIBUTETYPE_ERROR = 'ATTRIBUTETYPE_ERROR'
    GRAMMAR_LOAD_ERROR = 'GRAMMAR_LOAD_ERROR'
    UNKNOWN_ERROR = 'UNKNOWN_ERROR'

    ALL = (
        SYNTAX_ERROR,
        GRAMMAR_ERROR,
        MISSING_FIELD,
        INVALID_FIELD,
        INVALID_OID,
        INVALID_NAME,
        VALIDATION_ERROR,
        EMPTY_INPUT,
        OBJECTCLASS_ERROR,
        ATTRIBUTETYPE_ERROR,
        GRAMMAR_LOAD_ERROR,
        UNKNOWN_ERROR,
    )


class SchemaError(Exception):
    """Base class for all exceptions raised by ldapschema"""
    pass


class GrammarSyntaxError(SchemaError):
    """Raised by the grammar when no production matches the input.

    This is the low-level failure; :class:`.SchemaParser` re-raises it as a :class:`SchemaParseError` with
    ``SYNTAX_ERROR`` type and keeps it as the cause.

    :var Position position: The furthest point the engine reached
    :var tuple(str) expected: Description of the rule that failed at that point
    :var str found: The offending text, or None at end of input
    """
    def __init__(self, message, position, expected=(), found=None):
        SchemaError.__init__(self, message)
        self.position = position
        self.expected = tuple(expected)
        self.found = found


class LdifError(SchemaError):
    """Raised when an LDIF value cannot be decoded"""
    pass


class SchemaParseError(SchemaError):
    """Raised when a schema definition cannot be parsed or violates RFC 4512.

    :param str message: Human-readable description
    :param str error_type: One of the :class:`ErrorType` constants
    :param str schema_definition: The original, untrimmed input
    :param Position position: Location of the failure, only set for grammar-level syntax failures
    :param str context: Which RFC clause or field is implicated
    :param Exception cause: The lower-level error this one was created from

    :var str message:
    :var str error_type:
    :var str schema_definition:
    :var Position position:
    :var str context:
    :var Exception cause:
    """
    def __init__(self, message, error_type, schema_definition, position=None, context=None, cause=None):
        if error_type not in ErrorType.ALL:
            raise ValueError('Unknown error type {0}'.format(error_type))
        SchemaError.__init__(self, message)
        self.message = message
        self.error_type = error_type
        self.schema_definition = schema_definition
        self.position = position
        self.context = context
        self.cause = cause

    @classmethod
    def from_error(cls, error, error_type, schema_definition, position=None, context=None):
        """Wrap a lower-level exception, keeping its message and storing it as the cause"""
        return cls(str(error), error_type, schema_definition, position=position, context=context, cause=error)

    def detailed_message(self):
        """Render kind, message, position, context, an input preview and the cause on multiple lines

        :rtype: str
        """
        message = '{0}: {1}'.format(self.error_type, self.message)
        if self.position is not None:
            message += ' at line {0}, column {1}'.format(self.position.line, self.position.column)
        if self.context:
            message += '\nContext: {0}'.format(self.context)
        if self.schema_definition:
            message += '\nSchema: {0}'.format(preview(self.schema_definition))
        if self.cause is not None:
            message += '\nCaused by: {0}'.format(self.cause)
        return message

    def to_dict(self):
        """Flatten the error into a plain, JSON-compatible dict for logging or structured output

        :rtype: dict
        """
        cause = None
        if self.cause is not None:
            cause_position = getattr(self.cause, 'position', None)
            cause = {
                'name': self.cause.__class__.__name__,
                'message': str(self.cause),
                'position': _position_dict(cause_position),
            }
        return {
            'name': self.__class__.__name__,
            'message': self.message,
            'errorType': self.error_type,
            'schemaDefinition': self.schema_definition,
            'position': _position_dict(self.position),
            'context': self.context,
            'cause': cause,
        }

    def __repr__(self):
        return '<{0} {1}: {2!r}>'.format(self.__class__.__name__, self.error_type, self.message)


def _position_dict(position):
    if position is None:
        return None
    return dict(position._asdict())
