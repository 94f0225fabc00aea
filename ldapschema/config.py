"""Provides support for configuring the schema parser via config files and dicts"""

from collections import namedtuple
import json
import re
import yaml

ParserConfig = namedtuple('ParserConfig', ['relaxed_mode', 'allow_must_may_overlap'])
ParserConfig.__doc__ = """Immutable parser options.

:var bool relaxed_mode: Accept OpenLDAP ``OLcfg*`` OIDs and non-numeric syntax OIDs
:var bool allow_must_may_overlap: Allow an attribute to appear in both MUST and MAY of an object class
"""

DEFAULT_CONFIG = ParserConfig(relaxed_mode=False, allow_must_may_overlap=False)

_re_camel_hump = re.compile(r'([a-z0-9])([A-Z])')


def normalize_config_param(key):
    """Normalize a parser config key. Does not check validity of the key.

    Accepts ``relaxedMode``, ``relaxed_mode``, ``RELAXED_MODE`` and ``relaxed-mode`` spellings.

    :param str key: User-supplied config key
    :return: The normalized key formatted as a field of :class:`ParserConfig`
    :rtype: str
    """
    key = _re_camel_hump.sub(r'\1_\2', key)
    return key.replace('-', '_').lower()


def make_config(base=None, **kwds):
    """Build a new config from a base config and overrides. Overrides set to None are ignored.

    :param ParserConfig base: Starting point, defaults to :data:`DEFAULT_CONFIG`
    :rtype: ParserConfig
    :raises KeyError: if an unknown option is given
    :raises TypeError: if an option value is not a bool
    """
    if base is None:
        base = DEFAULT_CONFIG
    overrides = {}
    bad = []
    for key, val in kwds.items():
        if val is None:
            continue
        norm_key = normalize_config_param(key)
        if norm_key not in ParserConfig._fields:
            bad.append(key)
            continue
        if not isinstance(val, bool):
            raise TypeError('Parser config option {0} must be a bool'.format(key))
        overrides[norm_key] = val
    if bad:
        raise KeyError('Unknown parser config options: {0}'.format(', '.join(bad)))
    return base._replace(**overrides)


def load_config_dict(config_dict):
    """Load a parser config from a dict. The dict must be formatted as follows::

        {'parser': {
            <config param>: <config value>,
         }
        }

    ``<config param>`` must name one of the :class:`ParserConfig` fields; snake, camel, and upper case spellings are
    all accepted. Any parameters not specified keep the hard-coded default.

    :param dict config_dict: See above.
    :rtype: ParserConfig
    :raises KeyError: if the dict is incorrectly formatted or contains unknown config parameters
    :raises TypeError: if a config value is not a bool
    """
    if not isinstance(config_dict, dict) or not isinstance(config_dict.get('parser'), dict):
        raise KeyError('Config must contain a parser section mapping option names to values')
    return make_config(**config_dict['parser'])


def load_file(path, file_decoder=None):
    """Load a parser config from a file.

    :param str path: The path to the config file.
    :param callable file_decoder: Optional; function used to parse the file. Must accept a file-like object and return
                                  a dict. Required for extensions other than ``.yaml``, ``.yml``, and ``.json``.
    :rtype: ParserConfig
    :raises RuntimeError: if no decoder is given and the file extension is not recognized
    """
    if not file_decoder:
        if path.endswith('.yaml') or path.endswith('.yml'):
            file_decoder = yaml.safe_load
        elif path.endswith('.json'):
            file_decoder = json.load
        else:
            raise RuntimeError('Unknown config file extension, please specify decoder')
    with open(path) as f:
        config_dict = file_decoder(f)
    return load_config_dict(config_dict)
