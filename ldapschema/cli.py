"""Command-line interface for parsing schema descriptions."""

from .config import load_file, make_config
from .exceptions import LdifError, SchemaParseError
from .ldif import iter_schema_values
from .parser import SchemaParser

import click
import json
import logging
import yaml

_pretty_fields = (
    ('OID', 'oid'),
    ('Name', 'name'),
    ('Description', 'desc'),
    ('Type', 'kind'),
    ('Superior', 'sup'),
    ('MUST', 'must'),
    ('MAY', 'may'),
    ('Syntax', 'syntax'),
    ('Usage', 'usage'),
    ('Equality', 'equality'),
    ('Ordering', 'ordering'),
    ('Substring', 'substr'),
)


def _format_value(value):
    if isinstance(value, (list, tuple)):
        return ', '.join(value)
    if isinstance(value, dict):
        if 'length' in value:
            return '{0}{{{1}}}'.format(value['oid'], value['length'])
        return value['oid']
    return str(value)


def format_pretty_definition(definition):
    data = definition.to_dict()
    lines = ['[{0}]'.format(data['type'])]
    for label, key in _pretty_fields:
        value = data.get(key)
        if value:
            lines.append('  {0}: {1}'.format(label, _format_value(value)))
    for key, value in sorted((data.get('extensions') or {}).items()):
        lines.append('  {0}: {1}'.format(key, value))
    return '\n'.join(lines)


def format_result(definitions, output_format):
    """Render parsed definitions

    :param list definitions: Parsed definitions
    :param str output_format: ``pretty`` or ``json``
    :rtype: str
    """
    if output_format == 'json':
        if len(definitions) == 1:
            data = definitions[0].to_dict()
        else:
            data = [definition.to_dict() for definition in definitions]
        return json.dumps({'success': True, 'data': data}, indent=2)
    blocks = ['Parse Success']
    blocks.extend(format_pretty_definition(definition) for definition in definitions)
    return '\n'.join(blocks)


def format_error(error, output_format):
    """Render a parse error

    :param SchemaParseError error:
    :param str output_format: ``pretty`` or ``json``
    :rtype: str
    """
    if output_format == 'json':
        return json.dumps({'success': False, 'error': error.to_dict()}, indent=2)
    return 'Parse Error: {0}'.format(error.detailed_message())


def _fail(message):
    click.echo('Error: {0}'.format(message), err=True)
    raise SystemExit(1)


def _emit(text, output, err=False):
    if output:
        with open(output, 'w') as f:
            f.write(text + '\n')
    else:
        click.echo(text, err=err)


@click.command(context_settings={'help_option_names': ['-h', '--help']})
@click.argument('schema', required=False)
@click.option('-i', '--input', 'input_path', type=click.Path(exists=True, dir_okay=False),
              help='Read the schema description from a file.')
@click.option('-o', '--output', 'output_path', type=click.Path(dir_okay=False),
              help='Write the result to a file instead of stdout.')
@click.option('-f', '--format', 'output_format', type=click.Choice(['pretty', 'json']), default='pretty',
              show_default=True, help='Output format.')
@click.option('-v', '--verbose', is_flag=True, default=False, help='Log parser activity to stderr.')
@click.option('--relaxed', is_flag=True, default=False, help='Accept OpenLDAP cn=config OIDs and named syntaxes.')
@click.option('--allow-must-may-overlap', is_flag=True, default=False,
              help='Allow an attribute in both MUST and MAY.')
@click.option('-c', '--config', 'config_path', type=click.Path(exists=True, dir_okay=False),
              help='YAML or JSON parser config file.')
@click.option('--ldif', is_flag=True, default=False, help='Parse every schema value in an LDIF or cn=config dump.')
def main(schema, input_path, output_path, output_format, verbose, relaxed, allow_must_may_overlap, config_path,
         ldif):
    """Parse an RFC 4512 schema description and report the result."""
    if verbose:
        SchemaParser.enable_logging(logging.DEBUG)

    if input_path:
        with open(input_path) as f:
            schema = f.read()
    if schema is None:
        _fail('provide a schema description argument or --input FILE')

    config = None
    try:
        if config_path:
            config = load_file(config_path)
        # flags only ever switch options on, leaving config file values otherwise
        config = make_config(config, relaxed_mode=relaxed or None,
                             allow_must_may_overlap=allow_must_may_overlap or None)
    except KeyError as e:
        _fail('invalid config {0}: {1}'.format(config_path, e.args[0]))
    except (TypeError, ValueError, RuntimeError, yaml.YAMLError) as e:
        _fail('invalid config {0}: {1}'.format(config_path, e))
    parser = SchemaParser(config)

    try:
        if ldif:
            definitions = parser.parse_many(iter_schema_values(schema))
        else:
            definitions = [parser.parse(schema)]
    except SchemaParseError as e:
        _emit(format_error(e, output_format), output_path, err=(output_format == 'pretty'))
        raise SystemExit(1)
    except LdifError as e:
        _fail(e)

    _emit(format_result(definitions, output_format), output_path)
