from .config import DEFAULT_CONFIG, make_config
from .exceptions import ErrorType, GrammarSyntaxError, SchemaError, SchemaParseError
from .grammar import SchemaGrammar
from .preprocess import check_vendor_oids, prepare
from .validation import SchemaValidator

import logging

logger = logging.getLogger('ldapschema')
logger.addHandler(logging.NullHandler())
logger.setLevel(logging.DEBUG)


class SchemaParser(object):
    """Parses RFC 4512 object class, attribute type, and LDAP syntax descriptions.

    A parser holds one compiled grammar and an immutable config; it keeps no state between calls and may be shared.

    :param ParserConfig config: Base options, defaults to strict RFC 4512
    :param bool relaxed_mode: Override ``config.relaxed_mode``. Relaxed mode accepts OpenLDAP ``OLcfg*`` OIDs and
                              named syntaxes such as ``OMsDirectoryString``.
    :param bool allow_must_may_overlap: Override ``config.allow_must_may_overlap``
    :raises SchemaParseError: with ``GRAMMAR_LOAD_ERROR`` type if the grammar cannot be built
    """

    LOG_FORMAT = '[%(asctime)s] %(name)s %(levelname)s : %(message)s'

    @staticmethod
    def enable_logging(level=logging.DEBUG):
        """Enable logging output to stderr"""
        stderr_handler = logging.StreamHandler()
        stderr_handler.setFormatter(logging.Formatter(SchemaParser.LOG_FORMAT))
        stderr_handler.setLevel(level)
        logger.addHandler(stderr_handler)
        return stderr_handler

    def __init__(self, config=None, relaxed_mode=None, allow_must_may_overlap=None):
        if config is None:
            config = DEFAULT_CONFIG
        self._config = make_config(config, relaxed_mode=relaxed_mode,
                                   allow_must_may_overlap=allow_must_may_overlap)
        self._grammar = SchemaGrammar(relaxed_mode=self._config.relaxed_mode)
        self._validator = SchemaValidator(self._config)

    @property
    def config(self):
        """The :class:`.ParserConfig` this parser was built with"""
        return self._config

    def parse(self, text):
        """Parse and validate one schema description.

        A leading ordinal marker such as ``{57}`` is ignored.

        :param str text: The schema description
        :return: The typed definition
        :rtype: ObjectClassDefinition or AttributeTypeDefinition or LdapSyntaxDefinition
        :raises SchemaParseError: if the input is empty, malformed, or violates RFC 4512
        """
        prepared = prepare(text)
        self._validator.check_input(prepared)
        check_vendor_oids(prepared, self._config.relaxed_mode)
        try:
            raw = self._grammar.parse(prepared.text, prepared.start, prepared.end)
        except GrammarSyntaxError as e:
            raise SchemaParseError.from_error(e, ErrorType.SYNTAX_ERROR, text, position=e.position) from e
        except Exception as e:
            raise SchemaParseError.from_error(e, ErrorType.UNKNOWN_ERROR, text,
                                              context='Unexpected error in grammar engine') from e
        return self._validator.validate(raw, text)

    def parse_many(self, texts):
        """Parse a sequence of schema descriptions. The first failure is raised and aborts the rest.

        :param texts: Iterable of schema descriptions
        :rtype: list
        :raises SchemaParseError: for the first description that fails
        """
        return [self.parse(text) for text in texts]

    def is_valid(self, text):
        """Check whether a schema description parses without error

        :rtype: bool
        """
        try:
            self.parse(text)
            return True
        except SchemaError:
            return False

    def extract_oid(self, text):
        """Get the OID of a schema description, or None if it does not parse

        :rtype: str or None
        """
        try:
            return self.parse(text).oid
        except SchemaError:
            return None

    def extract_name(self, text):
        """Get the name of a schema description, or None if it does not parse or is an LDAP syntax

        :rtype: str or None
        """
        try:
            return self.parse(text).name
        except SchemaError:
            return None


_default_parsers = {}


def get_parser(config=None):
    """Get a shared parser for a config

    :param ParserConfig config: Defaults to strict RFC 4512
    :rtype: SchemaParser
    """
    if config is None:
        config = DEFAULT_CONFIG
    try:
        return _default_parsers[config]
    except KeyError:
        parser = SchemaParser(config)
        _default_parsers[config] = parser
        return parser


def parse(text, config=None):
    """Parse one schema description with a shared parser. See :meth:`SchemaParser.parse`"""
    return get_parser(config).parse(text)


def parse_many(texts, config=None):
    return get_parser(config).parse_many(texts)


def is_valid(text, config=None):
    return get_parser(config).is_valid(text)


def extract_oid(text, config=None):
    return get_parser(config).extract_oid(text)


def extract_name(text, config=None):
    return get_parser(config).extract_name(text)
