from logging import getLogger
from re import compile as re_compile, Pattern, Match as ReMatch, DOTALL
from typing import Iterator

from abnf import Node, ParseError

from http_negotiate.grammar import Rule
from http_negotiate.errors import MalformedInputError
from http_negotiate.structures.media_type import MediaType, QUALITY_PARAMETER

LOG = getLogger(__name__)

DEFAULT_QUALITY = 1.0

# The cost of matching a repetition grows with the square of its length.
MAX_MEDIA_TYPE_LENGTH = 1024

# A comma outside of a quoted string delimits the members of a list.
LIST_DELIMITER_PATTERN: Pattern = re_compile(pattern=r'"(?:[^"\\]|\\.)*"|,', flags=DOTALL)

OWS_CHARACTERS = ' \t'


def _parse_rule(rule_name: str, source: str) -> Node:
    if not isinstance(source, str) or not source or len(source) > MAX_MEDIA_TYPE_LENGTH:
        raise MalformedInputError(source=source, rule_name=rule_name)

    try:
        return Rule(rule_name).parse_all(source)
    except ParseError as e:
        raise MalformedInputError(source=source, rule_name=rule_name) from e


def _split_list(list_value: str) -> list[str]:
    """
    Split a list into its members, removing the optional whitespace around each delimiting comma.

    :param list_value: A comma-separated list of media types.
    :return: The list members, which are not validated.
    """

    members: list[str] = []
    start = 0

    delimiter_re_match: ReMatch
    for delimiter_re_match in LIST_DELIMITER_PATTERN.finditer(string=list_value):
        if delimiter_re_match.group(0) != ',':
            continue

        member = list_value[start:delimiter_re_match.start(0)].rstrip(OWS_CHARACTERS)
        members.append(member.lstrip(OWS_CHARACTERS) if members else member)
        start = delimiter_re_match.end(0)

    # No whitespace is allowed at the start or at the end of the list.
    members.append(list_value[start:].lstrip(OWS_CHARACTERS) if members else list_value)

    return members


def _search(node: Node, names: set[str]) -> Iterator[Node]:
    """Yield, in source order, the nodes below `node` with one of the names, without descending into them."""

    stack: list[Node] = list(reversed(node.children))
    while stack:
        current_node: Node = stack.pop()
        if current_node.name in names:
            yield current_node
        else:
            stack.extend(reversed(getattr(current_node, 'children', ())))


def _media_type_from_node(media_type_node: Node) -> MediaType:
    media_type_type: str | None = None
    media_type_subtype: str | None = None
    parameters: dict[str, str | float] = {}

    for node in _search(node=media_type_node, names={'type', 'subtype', 'parameter'}):
        match node.name:
            case 'type':
                media_type_type = node.value
            case 'subtype':
                media_type_subtype = node.value
            case 'parameter':
                attribute_node: Node
                value_node: Node
                attribute_node, value_node = _search(node=node, names={'attribute', 'value'})
                value_node = next(_search(node=value_node, names={'token', 'quoted-string'}))

                if value_node.name == 'quoted-string':
                    # The escape sequences of the quoted string are kept as they are.
                    value = value_node.value[1:-1]
                else:
                    value = value_node.value

                # A repeated attribute overwrites the earlier value.
                parameters[attribute_node.value] = value

    return MediaType(type=media_type_type, subtype=media_type_subtype, parameters=parameters)


def normalize_quality(parameters: dict[str, str | float]) -> dict[str, str | float]:
    """
    Replace the `q` parameter value with its numeric quality value.

    A missing, non-numeric or out-of-range (outside of [0, 1]) value becomes the default quality value, 1.

    :param parameters: The parameters of a media range; modified in place.
    :return: The same parameter mapping.
    """

    raw_quality = parameters.get(QUALITY_PARAMETER)

    try:
        quality = float(raw_quality) if raw_quality is not None else DEFAULT_QUALITY
    except (ValueError, TypeError):
        LOG.debug(f'Non-numeric quality value {raw_quality!r}; using the default.')
        quality = DEFAULT_QUALITY

    if not 0.0 <= quality <= 1.0:
        LOG.debug(f'Quality value {raw_quality!r} is out of range; using the default.')
        quality = DEFAULT_QUALITY

    parameters[QUALITY_PARAMETER] = quality

    return parameters


def parse_mime_type(mime_type_value: str) -> MediaType:
    """
    Parse a mime type into its type, subtype and parameters.

    :param mime_type_value: A `media-type` string, e.g. `application/xhtml;q=0.5`.
    :return: The parsed media type. Its parameters are not normalized.
    :raises MalformedInputError: If the value as a whole does not match the `media-type` grammar.
    """

    return _media_type_from_node(media_type_node=_parse_rule(rule_name='media-type', source=mime_type_value))


def parse_media_range(media_range_value: str) -> MediaType:
    """
    Parse a media range, i.e. a mime type that may contain wildcards and that has a quality value.

    :param media_range_value: A `media-type` string, e.g. `text/*;q=0.3`.
    :return: The parsed media range, with its `q` parameter normalized to a number.
    :raises MalformedInputError: If the value as a whole does not match the `media-type` grammar.
    """

    media_range = parse_mime_type(mime_type_value=media_range_value)
    normalize_quality(parameters=media_range.parameters)

    return media_range


def parse_media_ranges(media_ranges_value: str) -> list[MediaType]:
    """
    Parse a comma-separated list of media ranges, such as an `Accept` header value.

    :param media_ranges_value: The list of media ranges to be parsed.
    :return: The parsed media ranges, in the order in which they appear, each with a normalized `q` parameter.
    :raises MalformedInputError: If any member of the list is malformed or if trailing data remains.
    """

    if not isinstance(media_ranges_value, str) or not media_ranges_value:
        raise MalformedInputError(source=media_ranges_value, rule_name='media-types')

    try:
        return [
            parse_media_range(media_range_value=member)
            for member in _split_list(list_value=media_ranges_value)
        ]
    except MalformedInputError as e:
        raise MalformedInputError(source=media_ranges_value, rule_name='media-types') from e


def parse_accept(accept_value: str) -> list[MediaType]:
    """
    Parse an `Accept` header value into media ranges ordered by client preference.

    :param accept_value: The `Accept` header value to be parsed.
    :return: The media ranges ordered by descending quality value; ranges with equal quality keep their order.
    """

    return sorted(
        parse_media_ranges(media_ranges_value=accept_value),
        key=lambda media_range: media_range.parameters[QUALITY_PARAMETER],
        reverse=True
    )
