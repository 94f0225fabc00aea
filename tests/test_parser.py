import ldapschema
from ldapschema import (
    AttributeTypeDefinition,
    ErrorType,
    LdapSyntaxDefinition,
    ObjectClassDefinition,
    ParserConfig,
    SchemaParseError,
    SchemaParser,
    SyntaxSpec,
)
from ldapschema.exceptions import GrammarSyntaxError
from . import utils

import logging
import unittest


class TestScenarios(unittest.TestCase):
    def setUp(self):
        self.parser = SchemaParser()
        self.relaxed = SchemaParser(relaxed_mode=True)

    def test_person(self):
        """Ensure a standard object class parses to the expected definition"""
        oc = self.parser.parse(utils.PERSON)
        self.assertIsInstance(oc, ObjectClassDefinition)
        self.assertEqual(oc.oid, '2.5.6.6')
        self.assertEqual(oc.name, 'person')
        self.assertEqual(oc.desc, 'RFC2256: a person')
        self.assertEqual(oc.sup, ('top',))
        self.assertEqual(oc.kind, 'STRUCTURAL')
        self.assertEqual(oc.must, ('sn', 'cn'))
        self.assertEqual(oc.may, ('userPassword', 'telephoneNumber'))
        self.assertIsNone(oc.extensions)

    def test_name_superior(self):
        """Ensure attribute types derived from the name attribute parse"""
        cn = self.parser.parse(utils.CN)
        self.assertIsInstance(cn, AttributeTypeDefinition)
        self.assertEqual(cn.sup, 'name')

        sn = self.parser.parse(utils.SN)
        self.assertIsInstance(sn, AttributeTypeDefinition)
        self.assertEqual(sn.name, 'sn')
        self.assertEqual(sn.sup, 'name')

        at = self.parser.parse("( 1.2.3 NAME 'a' SUP name X-ORIGIN 'x' )")
        self.assertEqual(at.sup, 'name')
        self.assertEqual(at.extensions, {'X-ORIGIN': 'x'})
        self.assertTrue(self.parser.is_valid(utils.CN))

        # object classes may be named after attribute type keywords
        oc = self.parser.parse("( 1.2.3 NAME 'a' SUP syntax AUXILIARY MAY name )")
        self.assertEqual(oc.sup, ('syntax',))
        self.assertEqual(oc.may, ('name',))

    def test_empty(self):
        """Ensure empty input is rejected before parsing"""
        for test in ('', '   \n', '{3}'):
            e = utils.get_parse_error(self.parser, test)
            self.assertEqual(e.error_type, ErrorType.EMPTY_INPUT)
            self.assertEqual(e.schema_definition, test)

    def test_ordinal_prefix(self):
        """Ensure an ordinal prefix does not change the result"""
        with_prefix = self.parser.parse(utils.SAMBA_ENCTYPES)
        without_prefix = self.parser.parse(utils.SAMBA_ENCTYPES_BODY)
        self.assertEqual(with_prefix, without_prefix)
        self.assertEqual(with_prefix.oid, '1.3.6.1.4.1.7165.2.1.80')
        self.assertEqual(with_prefix.name, 'sambaSupportedEncryptionTypes')
        self.assertEqual(with_prefix.equality, 'integerMatch')
        self.assertTrue(with_prefix.single_value)

    def test_missing_kind(self):
        """Ensure object classes need a kind"""
        e = utils.get_parse_error(self.parser, "( 2.5.6.6 NAME 'test' SUP top MUST cn )")
        self.assertEqual(e.error_type, ErrorType.OBJECTCLASS_ERROR)
        self.assertIn('must specify exactly one type', e.message)

    def test_must_may_overlap(self):
        """Ensure overlapping MUST and MAY is rejected"""
        e = utils.get_parse_error(self.parser, "( 2.5.6.6 NAME 'test' STRUCTURAL MUST ( cn ) MAY ( cn ) )")
        self.assertEqual(e.error_type, ErrorType.VALIDATION_ERROR)
        self.assertIn('cn', e.message)

        e = utils.get_parse_error(self.parser, utils.IP_PROTOCOL)
        self.assertEqual(e.message, 'Attributes cannot appear in both MUST and MAY: description')

    def test_vendor_oid(self):
        """Ensure OpenLDAP configuration OIDs need relaxed mode"""
        e = utils.get_parse_error(self.parser, utils.OLC_MEMBER_OF_DANGLING)
        self.assertEqual(e.error_type, ErrorType.SYNTAX_ERROR)
        self.assertIn('OpenLDAP configuration OIDs', e.message)

        at = self.relaxed.parse(utils.OLC_MEMBER_OF_DANGLING)
        self.assertIsInstance(at, AttributeTypeDefinition)
        self.assertEqual(at.oid, 'OLcfgOvAt:18.1')
        self.assertEqual(at.name, 'olcMemberOfDangling')
        self.assertEqual(at.syntax, SyntaxSpec('OMsDirectoryString', None))
        self.assertTrue(at.single_value)
        self.assertEqual(at.to_dict()['syntax'], {'oid': 'OMsDirectoryString'})
        self.assertTrue(at.to_dict()['singleValue'])

        self.assertEqual(self.relaxed.parse(utils.OLC_DB_MAX_SIZE).syntax.oid, 'OMsInteger')
        self.assertEqual(self.relaxed.parse(utils.OLC_READ_ONLY).oid, 'OLcfgGlAt:1.4')


class TestDefinitions(unittest.TestCase):
    def setUp(self):
        self.parser = SchemaParser()

    def test_attribute_types(self):
        at = self.parser.parse(utils.USER_PASSWORD)
        self.assertEqual(at.syntax, SyntaxSpec('1.3.6.1.4.1.1466.115.121.1.40', 128))
        self.assertEqual(at.equality, 'octetStringMatch')
        self.assertIsNone(at.sup)

        at = self.parser.parse(utils.SN)
        self.assertEqual(at.name, 'sn')
        self.assertEqual(at.sup, 'name')
        self.assertIsNone(at.syntax)

        at = self.parser.parse(utils.MAIL_SIEVE_RULE_SOURCE)
        self.assertEqual(at.extensions, {'X-ORIGIN': 'Sun ONE Messaging Server'})

    def test_object_classes(self):
        oc = self.parser.parse(utils.PILOT_ORGANIZATION)
        self.assertEqual(oc.sup, ('organization', 'organizationalUnit'))
        self.assertEqual(oc.may, ('buildingName',))
        self.assertIsNone(oc.must)

        oc = self.parser.parse(utils.MULTILINE_COUNTRY)
        self.assertEqual(oc.name, 'country')
        self.assertEqual(oc.must, ('c',))

        oc = self.parser.parse("( 1.2.3 NAME 'test' ABSTRACT MUST ( a $ b $ a ) )")
        self.assertEqual(oc.kind, 'ABSTRACT')
        self.assertEqual(oc.must, ('a', 'b'))

    def test_ldap_syntaxes(self):
        syntax = self.parser.parse(utils.ACI_ITEM_SYNTAX)
        self.assertIsInstance(syntax, LdapSyntaxDefinition)
        self.assertEqual(syntax.desc, 'ACI Item')
        self.assertEqual(syntax.extensions['X-NOT-HUMAN-READABLE'], 'TRUE')

        syntax = self.parser.parse("( 2.5.4.3 DESC 'test description' )")
        self.assertIsInstance(syntax, LdapSyntaxDefinition)


class TestErrors(unittest.TestCase):
    def setUp(self):
        self.parser = SchemaParser()

    def test_error_types(self):
        """Ensure malformed definitions are reported with the right error type"""
        tests = (
            ("( 1.2.3. NAME 'test' STRUCTURAL )", ErrorType.INVALID_OID),
            ("( abc.def NAME 'test' STRUCTURAL )", ErrorType.SYNTAX_ERROR),
            ("( 2.5.6.6 NAME 'test' SUP STRUCTURAL STRUCTURAL )", ErrorType.INVALID_FIELD),
            ("( 2.5.6.6 NAME 'test' SUP NAME STRUCTURAL )", ErrorType.INVALID_FIELD),
            ("( 2.5.6.6 NAME 'test' SUP DESC STRUCTURAL )", ErrorType.INVALID_FIELD),
            ("( 2.5.6.6 NAME 'test' SUP 123invalid STRUCTURAL )", ErrorType.INVALID_FIELD),
            ("( 2.5.6.6 NAME 'test' STRUCTURAL MUST ( 123invalid ) )", ErrorType.INVALID_NAME),
            ("( 2.5.6.6 NAME 'test' STRUCTURAL MAY ( invalid-char@ ) )", ErrorType.SYNTAX_ERROR),
            ("( 1.2.3 NAME 'test' EQUALITY caseIgnoreMatch )", ErrorType.ATTRIBUTETYPE_ERROR),
            ("( 1.2.3 NAME 'test' SUP SYNTAX )", ErrorType.INVALID_FIELD),
            ("( 1.2.3 NAME 'test' SUP EQUALITY )", ErrorType.INVALID_FIELD),
            ("( 2.5.6.6 NAME 'test' invalid-syntax )", ErrorType.SYNTAX_ERROR),
            ("( 2.5.6.6 NAME 'test' STRUCTURAL AUXILIARY )", ErrorType.OBJECTCLASS_ERROR),
            ("( 2.5.6.6 NAME 'test' STRUCTURAL MUST () )", ErrorType.SYNTAX_ERROR),
            ("( 2.5.4.3 NAME", ErrorType.SYNTAX_ERROR),
            ("( 1.2.3 NAME '' SUP name )", ErrorType.MISSING_FIELD),
            ("( 1.2.3 NAME 'test' OBSOLETE SUP name )", ErrorType.INVALID_FIELD),
            ("( 1.2.3 NAME 'test' SYNTAX directoryString )", ErrorType.INVALID_FIELD),
            ("( 2.5.6.6 NAME 'test' STRUCTURAL MUST MAY )", ErrorType.INVALID_NAME),
            ("( 2.5.6.6 NAME 'test' STRUCTURAL MUST ( cn $ STRUCTURAL ) )", ErrorType.INVALID_NAME),
            ("( 2.5.6.6 NAME 'test' STRUCTURAL MAY ( SYNTAX $ sn ) )", ErrorType.INVALID_NAME),
            ("( 2.5.6.6 NAME 'test' DESC 'a' DESC 'b' STRUCTURAL )", ErrorType.SYNTAX_ERROR),
        )

        for test, expected in tests:
            e = utils.get_parse_error(self.parser, test)
            self.assertEqual(e.error_type, expected, test)
            self.assertEqual(e.schema_definition, test)

    def test_syntax_error_position(self):
        """Ensure syntax errors carry a position relative to the original input"""
        e = utils.get_parse_error(self.parser, "( 2.5.6.6 NAME 'test' invalid-syntax )")
        self.assertEqual(e.position.line, 1)
        self.assertEqual(e.position.column, 23)
        self.assertIsInstance(e.cause, GrammarSyntaxError)
        self.assertIs(e.__cause__, e.cause)

        e = utils.get_parse_error(self.parser, "{1}( 2.5.6.6 NAME 'test' invalid-syntax )")
        self.assertEqual(e.position.offset, 25)
        self.assertEqual(e.position.column, 26)

    def test_validation_errors_have_no_position(self):
        e = utils.get_parse_error(self.parser, utils.IP_PROTOCOL)
        self.assertIsNone(e.position)
        self.assertIsNone(e.cause)

    def test_unknown_error(self):
        """Ensure unexpected engine failures are wrapped"""
        class BrokenGrammar(object):
            def parse(self, text, start=0, end=None):
                raise RuntimeError('boom')

        self.parser._grammar = BrokenGrammar()
        e = utils.get_parse_error(self.parser, utils.PERSON)
        self.assertEqual(e.error_type, ErrorType.UNKNOWN_ERROR)
        self.assertEqual(e.message, 'boom')
        self.assertIsInstance(e.cause, RuntimeError)


class TestProperties(unittest.TestCase):
    def test_deterministic(self):
        """Ensure repeated parses give equal results"""
        parser = SchemaParser()
        for test in utils.STRICT_VALID:
            self.assertEqual(parser.parse(test), parser.parse(test))
            self.assertEqual(parser.parse(test), SchemaParser().parse(test))

    def test_relaxed_superset(self):
        """Ensure relaxed mode accepts everything strict mode accepts, with equal results"""
        strict = SchemaParser()
        relaxed = SchemaParser(relaxed_mode=True)
        for test in utils.STRICT_VALID:
            self.assertEqual(strict.parse(test), relaxed.parse(test))
        for test in utils.RELAXED_ONLY:
            self.assertFalse(strict.is_valid(test))
            self.assertTrue(relaxed.is_valid(test))

    def test_prefix_transparency(self):
        """Ensure an ordinal prefix never changes the outcome"""
        parser = SchemaParser()
        for test in utils.STRICT_VALID:
            if test.startswith('{'):
                continue
            self.assertEqual(parser.parse('{12}' + test), parser.parse(test))
            self.assertEqual(parser.parse('  {0} ' + test), parser.parse(test))

    def test_overlap_toggle(self):
        """Ensure allowing overlap only removes overlap errors"""
        parser = SchemaParser(allow_must_may_overlap=True)
        oc = parser.parse(utils.IP_PROTOCOL)
        self.assertEqual(oc.must, ('cn', 'ipProtocolNumber', 'description'))
        self.assertEqual(oc.may, ('description',))
        for test in utils.STRICT_VALID:
            self.assertEqual(parser.parse(test), SchemaParser().parse(test))

    def test_fail_fast(self):
        """Ensure only the first violation is reported"""
        parser = SchemaParser()
        e = utils.get_parse_error(parser, "( 1.2.3. NAME 'test' SUP NAME STRUCTURAL MUST a MAY a )")
        self.assertEqual(e.error_type, ErrorType.INVALID_OID)


class TestParserAPI(unittest.TestCase):
    def test_config(self):
        parser = SchemaParser(relaxed_mode=True)
        self.assertEqual(parser.config, ParserConfig(relaxed_mode=True, allow_must_may_overlap=False))

        base = ParserConfig(relaxed_mode=True, allow_must_may_overlap=True)
        parser = SchemaParser(base, relaxed_mode=False)
        self.assertEqual(parser.config, ParserConfig(relaxed_mode=False, allow_must_may_overlap=True))

        with self.assertRaises(TypeError):
            SchemaParser(relaxed_mode='yes')

    def test_parse_many(self):
        parser = SchemaParser()
        results = parser.parse_many([utils.PERSON, utils.CN, utils.ACI_ITEM_SYNTAX])
        self.assertEqual([r.type for r in results], ['objectClass', 'attributeType', 'ldapSyntax'])
        self.assertEqual(parser.parse_many([]), [])

        with self.assertRaises(SchemaParseError) as cm:
            parser.parse_many([utils.PERSON, utils.IP_PROTOCOL, ''])
        self.assertEqual(cm.exception.error_type, ErrorType.VALIDATION_ERROR)

    def test_is_valid(self):
        parser = SchemaParser()
        self.assertTrue(parser.is_valid(utils.PERSON))
        self.assertFalse(parser.is_valid(''))
        self.assertFalse(parser.is_valid(utils.IP_PROTOCOL))

    def test_extract(self):
        parser = SchemaParser()
        self.assertEqual(parser.extract_oid(utils.PERSON), '2.5.6.6')
        self.assertEqual(parser.extract_name(utils.PERSON), 'person')
        self.assertIsNone(parser.extract_oid('( broken'))
        self.assertIsNone(parser.extract_name('( broken'))
        self.assertEqual(parser.extract_oid(utils.ACI_ITEM_SYNTAX), '1.3.6.1.4.1.1466.115.121.1.1')
        self.assertIsNone(parser.extract_name(utils.ACI_ITEM_SYNTAX))

    def test_module_functions(self):
        self.assertEqual(ldapschema.parse(utils.CN).name, 'cn')
        self.assertEqual(len(ldapschema.parse_many([utils.CN, utils.SN])), 2)
        self.assertTrue(ldapschema.is_valid(utils.PERSON))
        self.assertFalse(ldapschema.is_valid(utils.OLC_READ_ONLY))
        relaxed = ParserConfig(relaxed_mode=True, allow_must_may_overlap=False)
        self.assertTrue(ldapschema.is_valid(utils.OLC_READ_ONLY, config=relaxed))
        self.assertEqual(ldapschema.extract_oid(utils.CN), '2.5.4.3')
        self.assertEqual(ldapschema.extract_name(utils.SN), 'sn')

    def test_enable_logging(self):
        handler = SchemaParser.enable_logging(logging.INFO)
        try:
            self.assertIsInstance(handler, logging.StreamHandler)
            self.assertEqual(handler.level, logging.INFO)
            self.assertIn(handler, logging.getLogger('ldapschema').handlers)
        finally:
            logging.getLogger('ldapschema').removeHandler(handler)
