"""
Parser rules for the media-type grammar of RFC 2616, sections 2.2, 3.7 and 14.1.

Only octets in the US-ASCII range are accepted. Unlike the RFC 7231 grammar, no whitespace is allowed around the `;`
parameter delimiter.
"""

from abnf.parser import Rule as _Rule
from abnf.grammars.misc import load_grammar_rules


@load_grammar_rules()
class Rule(_Rule):
    """Rules for media types and media ranges."""

    grammar = [
        'media-type = type "/" subtype *( ";" parameter )',
        'type = token',
        'subtype = token',
        'parameter = attribute "=" value',
        'attribute = token',
        'value = token / quoted-string',
        # Any CHAR except CTLs and separators.
        'token = 1*( %x21 / %x23-27 / %x2A-2B / %x2D-2E / %x30-39 / %x41-5A / %x5E-7A / %x7C / %x7E )',
        'quoted-string = %x22 *( qdtext / quoted-pair ) %x22',
        # A backslash always starts a quoted-pair.
        'qdtext = %x20-21 / %x23-5B / %x5D-7E',
        'quoted-pair = %x5C %x00-7F',
    ]
