"""
Content negotiation as described in RFC 2616, section 14.1.

The candidate with the highest fitness wins; the quality value of the media range that gave the highest fitness breaks
ties, and after that the position of the candidate in the list of supported mime types, the later the better.
"""

from logging import getLogger
from typing import Iterable, Sequence

from http_negotiate.errors import MalformedInputError
from http_negotiate.parse.media_type import parse_media_range, parse_media_ranges, normalize_quality
from http_negotiate.structures.media_type import MediaType, WILDCARD, QUALITY_PARAMETER

LOG = getLogger(__name__)

TYPE_MATCH_FITNESS = 100
SUBTYPE_MATCH_FITNESS = 10
PARAMETER_MATCH_FITNESS = 1

NO_MATCH: tuple[int, float] = (-1, 0.0)


def _matches(range_value: str, candidate_value: str) -> bool:
    return range_value == candidate_value or range_value == WILDCARD or candidate_value == WILDCARD


def fitness_and_quality_parsed(mime_type: str, parsed_ranges: Sequence[MediaType] | None) -> tuple[int, float]:
    """
    Find the best match for a mime type amongst parsed media ranges.

    The fitness is 100 for a matching type, 10 for a matching subtype and 1 for each parameter of the mime type,
    other than `q`, that a media range has with the same value. Wildcards on either side match but do not add to the
    fitness.

    :param mime_type: The mime type to be matched.
    :param parsed_ranges: Media ranges as returned by `parse_media_ranges`.
    :return: The fitness and the quality value of the best matching media range, or `(-1, 0.0)` if no media range
        matches or the mime type is malformed.
    """

    if not parsed_ranges:
        return NO_MATCH

    try:
        target: MediaType = parse_media_range(media_range_value=mime_type)
    except MalformedInputError:
        LOG.debug(f'Unable to parse the candidate mime type {mime_type!r}; it cannot match.')
        return NO_MATCH

    best_fitness, best_quality = NO_MATCH

    for media_range in parsed_ranges:
        if not (_matches(media_range.type, target.type) and _matches(media_range.subtype, target.subtype)):
            continue

        fitness = TYPE_MATCH_FITNESS if media_range.type == target.type else 0
        fitness += SUBTYPE_MATCH_FITNESS if media_range.subtype == target.subtype else 0

        # Only the parameters of the mime type are considered.
        fitness += sum(
            PARAMETER_MATCH_FITNESS
            for name, value in target.parameters.items()
            if name != QUALITY_PARAMETER and media_range.parameters.get(name) == value
        )

        if fitness > best_fitness:
            best_fitness = fitness
            # A record that has not been normalized as a media range gets the quality value it would have had.
            best_quality = normalize_quality(parameters=dict(media_range.parameters))[QUALITY_PARAMETER]

    return best_fitness, best_quality


def quality_parsed(mime_type: str, parsed_ranges: Sequence[MediaType] | None) -> float:
    """
    Find the quality value of the best match for a mime type amongst parsed media ranges.

    :param mime_type: The mime type to be matched.
    :param parsed_ranges: Media ranges as returned by `parse_media_ranges`.
    :return: The quality value of the best matching media range, or `0.0` if there is no match.
    """

    return fitness_and_quality_parsed(mime_type=mime_type, parsed_ranges=parsed_ranges)[1]


def quality(mime_type: str, ranges: str) -> float:
    """
    Find the quality value of the best match for a mime type amongst the media ranges of an `Accept` header value.

    :param mime_type: The mime type to be matched.
    :param ranges: An `Accept` header value.
    :return: The quality value of the best matching media range, or `0.0` if there is no match.
    :raises MalformedInputError: If the header value is malformed.
    """

    return quality_parsed(mime_type=mime_type, parsed_ranges=parse_media_ranges(media_ranges_value=ranges))


def _ranked_candidates(supported: Iterable[str], header: str) -> list[tuple[int, float, int, str]]:
    parsed_ranges: list[MediaType] = parse_media_ranges(media_ranges_value=header)

    return sorted(
        (
            (*fitness_and_quality_parsed(mime_type=mime_type, parsed_ranges=parsed_ranges), position, mime_type)
            for position, mime_type in enumerate(supported)
        ),
        key=lambda ranked_candidate: ranked_candidate[:3],
        reverse=True
    )


def best_matches(supported: Iterable[str], header: str) -> list[str]:
    """
    List the acceptable mime types, best match first.

    A candidate whose best fitness comes from a media range with a zero quality value excludes the candidates ranked
    below it; the list is then empty, just as `best_match` returns an empty string.

    :param supported: The supported mime types, in ascending order of preference.
    :param header: An `Accept` header value.
    :return: The supported mime types that have a nonzero quality value, ranked as by `best_match`.
    :raises MalformedInputError: If the header value is malformed.
    """

    ranked_candidates = _ranked_candidates(supported=supported, header=header)
    if not ranked_candidates or not ranked_candidates[0][1]:
        return []

    return [
        mime_type
        for _, candidate_quality, _, mime_type in ranked_candidates
        if candidate_quality
    ]


def best_match(supported: Iterable[str], header: str) -> str:
    """
    Choose the supported mime type that best matches an `Accept` header value.

    :param supported: The supported mime types, in ascending order of preference; the later of two equally good
        matches is chosen.
    :param header: An `Accept` header value.
    :return: The best matching mime type, or an empty string if none is acceptable.
    :raises MalformedInputError: If the header value is malformed.
    """

    ranked_candidates = _ranked_candidates(supported=supported, header=header)
    if not ranked_candidates:
        return ''

    fitness, candidate_quality, _, mime_type = ranked_candidates[0]
    if not candidate_quality:
        LOG.debug(f'No supported mime type is acceptable for {header!r}.')
        return ''

    LOG.debug(f'Chose {mime_type!r} for {header!r} with fitness {fitness} and quality {candidate_quality}.')

    return mime_type
