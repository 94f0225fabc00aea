from ldapschema import SchemaParseError

PERSON = ("( 2.5.6.6 NAME 'person' DESC 'RFC2256: a person' SUP top STRUCTURAL "
          "MUST ( sn $ cn ) MAY ( userPassword $ telephoneNumber ) )")

USER_PASSWORD = ("( 2.5.4.35 NAME 'userPassword' DESC 'RFC4519: password of user' EQUALITY octetStringMatch "
                 "SYNTAX 1.3.6.1.4.1.1466.115.121.1.40{128} )")

CN = "( 2.5.4.3 NAME 'cn' DESC 'RFC4519: common name(s) for which the entity is known by' SUP name )"

SN = "( 2.5.4.4 NAME ( 'sn' 'surname' ) DESC 'RFC4519: last (family) name(s) for which the entity is known by' SUP name )"

ACI_ITEM_SYNTAX = ("( 1.3.6.1.4.1.1466.115.121.1.1 DESC 'ACI Item' X-BINARY-TRANSFER-REQUIRED 'TRUE' "
                   "X-NOT-HUMAN-READABLE 'TRUE' )")

SAMBA_ENCTYPES_BODY = ("( 1.3.6.1.4.1.7165.2.1.80 NAME 'sambaSupportedEncryptionTypes' "
                       "DESC 'Supported encryption types of a trust' EQUALITY integerMatch "
                       "SYNTAX 1.3.6.1.4.1.1466.115.121.1.27 SINGLE-VALUE )")
SAMBA_ENCTYPES = '{57}' + SAMBA_ENCTYPES_BODY

IP_PROTOCOL = ("( 1.3.6.1.1.1.2.4 NAME 'ipProtocol' DESC 'Abstraction of an IP protocol' SUP top STRUCTURAL "
               "MUST ( cn $ ipProtocolNumber $ description ) MAY description )")

PILOT_ORGANIZATION = ("( 0.9.2342.19200300.100.4.20 NAME 'pilotOrganization' "
                      "SUP ( organization $ organizationalUnit ) STRUCTURAL MAY buildingName )")

MAIL_SIEVE_RULE_SOURCE = ("( 1.3.6.1.4.1.29426.1.10.9 NAME 'mailSieveRuleSource' "
                          "DESC 'Sun ONE Messaging Server defined attribute' "
                          "SYNTAX 1.3.6.1.4.1.1466.115.121.1.26 X-ORIGIN 'Sun ONE Messaging Server' )")

OLC_MEMBER_OF_DANGLING = ("( OLcfgOvAt:18.1 NAME 'olcMemberOfDangling' "
                          "DESC 'Behavior with respect to dangling members, constrained to ignore, drop, error' "
                          "SYNTAX OMsDirectoryString SINGLE-VALUE )")

OLC_DB_MAX_SIZE = "( OLcfgDbAt:2.3 NAME 'olcDbMaxSize' DESC 'Maximum size of DB in bytes' SYNTAX OMsInteger SINGLE-VALUE )"

OLC_READ_ONLY = "( OLcfgGlAt:1.4 NAME 'olcReadOnly' SYNTAX OMsBoolean SINGLE-VALUE )"

MULTILINE_COUNTRY = '''
  ( 2.5.6.2 NAME 'country'
     SUP top
     STRUCTURAL
     MUST c
     MAY ( searchGuide $
           description ) )
'''

STRICT_VALID = (
    PERSON,
    USER_PASSWORD,
    CN,
    SN,
    ACI_ITEM_SYNTAX,
    SAMBA_ENCTYPES,
    PILOT_ORGANIZATION,
    MAIL_SIEVE_RULE_SOURCE,
    MULTILINE_COUNTRY,
)

RELAXED_ONLY = (
    OLC_MEMBER_OF_DANGLING,
    OLC_DB_MAX_SIZE,
    OLC_READ_ONLY,
)


def get_parse_error(parser, text):
    """Parse text that is expected to fail and return the error"""
    try:
        parser.parse(text)
    except SchemaParseError as e:
        return e
    raise AssertionError('expected SchemaParseError for {0!r}'.format(text))
