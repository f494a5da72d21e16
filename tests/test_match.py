from pytest import mark, raises

from http_negotiate.errors import MalformedInputError
from http_negotiate.match import (
    fitness_and_quality_parsed, quality_parsed, quality, best_match, best_matches
)
from http_negotiate.parse.media_type import parse_media_ranges
from http_negotiate.structures.media_type import MediaType

RFC_2616_ACCEPT = 'text/*;q=0.3, text/html;q=0.7, text/html;level=1, text/html;level=2;q=0.4, */*;q=0.5'


@mark.parametrize(
    'mime_type, expected_quality',
    [
        ('text/html;level=1', 1.0),
        ('text/html', 0.7),
        ('text/plain', 0.3),
        ('image/jpeg', 0.5),
        ('text/html;level=2', 0.4),
        ('text/html;level=3', 0.7),
    ]
)
def test_quality_rfc_2616_example(mime_type: str, expected_quality: float):
    assert quality(mime_type, RFC_2616_ACCEPT) == expected_quality


def test_fitness_and_quality_parsed_wildcards():
    parsed_ranges = [
        MediaType(type='*', subtype='*', parameters={'q': 0.1}),
        MediaType(type='text', subtype='*', parameters={'q': 0.5}),
    ]

    assert fitness_and_quality_parsed('text/html', parsed_ranges) == (100, 0.5)
    assert fitness_and_quality_parsed('image/png', parsed_ranges) == (0, 0.1)


def test_fitness_and_quality_parsed_exact_match():
    parsed_ranges = parse_media_ranges('text/html;q=0.2, text/*;q=0.9')

    assert fitness_and_quality_parsed('text/html', parsed_ranges) == (110, 0.2)


def test_fitness_and_quality_parsed_candidate_wildcard():
    parsed_ranges = parse_media_ranges('text/html;q=0.6')

    assert fitness_and_quality_parsed('*/*', parsed_ranges) == (0, 0.6)
    assert fitness_and_quality_parsed('text/*', parsed_ranges) == (100, 0.6)


def test_fitness_counts_candidate_parameters_only():
    parsed_ranges = parse_media_ranges('text/html;level=1;charset=utf-8;q=0.5')

    # Parameters only present in the media range are ignored.
    assert fitness_and_quality_parsed('text/html', parsed_ranges) == (110, 0.5)
    assert fitness_and_quality_parsed('text/html;level=1', parsed_ranges) == (111, 0.5)
    assert fitness_and_quality_parsed('text/html;level=1;charset=utf-8', parsed_ranges) == (112, 0.5)
    assert fitness_and_quality_parsed('text/html;level=2', parsed_ranges) == (110, 0.5)
    # The quality value of the candidate does not count.
    assert fitness_and_quality_parsed('text/html;q=0.5', parsed_ranges) == (110, 0.5)


def test_fitness_first_best_range_wins():
    parsed_ranges = parse_media_ranges('text/html;q=0.2, text/html;q=0.9')

    assert fitness_and_quality_parsed('text/html', parsed_ranges) == (110, 0.2)


def test_fitness_and_quality_parsed_no_match():
    assert fitness_and_quality_parsed('image/png', parse_media_ranges('text/html')) == (-1, 0.0)
    assert fitness_and_quality_parsed('text/html', []) == (-1, 0.0)
    assert fitness_and_quality_parsed('text/html', None) == (-1, 0.0)
    assert fitness_and_quality_parsed('not-a-mime-type', parse_media_ranges('*/*')) == (-1, 0.0)


def test_quality_parsed():
    parsed_ranges = parse_media_ranges(RFC_2616_ACCEPT)

    assert quality_parsed('text/html', parsed_ranges) == 0.7
    assert quality_parsed('image/png', parse_media_ranges('text/*')) == 0.0


def test_quality_malformed_header():
    with raises(MalformedInputError):
        quality('text/html', 'text/html;')


@mark.parametrize(
    'supported, header, expected',
    [
        (['application/xbel+xml', 'text/xml'], 'text/*;q=0.5,*/*;q=0.1', 'text/xml'),
        (['application/xbel+xml', 'text/xml'], 'application/xbel+xml', 'application/xbel+xml'),
        (['application/xbel+xml', 'text/xml'], 'application/xbel+xml;q=1', 'application/xbel+xml'),
        (['application/xbel+xml', 'text/xml'], 'application/*;q=1', 'application/xbel+xml'),
        (['application/xbel+xml', 'text/xml'], '*/*', 'text/xml'),
        (['application/xbel+xml', 'application/xml'], 'application/*;q=0.5, application/xml;q=0.9', 'application/xml'),
        (['image/png'], 'text/html', ''),
        (['image/png'], 'image/png;q=0', ''),
        (['text/plain', 'text/html'], 'text/plain, text/html;q=0.8', 'text/plain'),
        (['text/html', 'text/plain'], 'text/*;q=0.3, text/html;q=0.7, */*;q=0.5', 'text/html'),
        (['text/html;level=1', 'text/html'], 'text/html;level=1, text/html;q=0.2', 'text/html;level=1'),
        (['not-a-mime-type', 'text/html'], 'text/html;q=0.1', 'text/html'),
        ([], '*/*', ''),
    ]
)
def test_best_match(supported: list[str], header: str, expected: str):
    assert best_match(supported, header) == expected


def test_best_match_later_candidate_wins_ties():
    supported = ['application/json', 'text/html', 'image/png']

    assert best_match(supported, '*/*') == 'image/png'
    assert best_match(supported[:2], '*/*') == 'text/html'


def test_best_match_malformed_header():
    with raises(MalformedInputError):
        best_match(['text/html'], 'text/html; q=0.5')


def test_best_matches():
    supported = ['text/plain', 'application/json', 'text/html', 'image/png']

    assert best_matches(supported, 'text/*;q=0.5, text/html, application/json;q=0.8, image/png;q=0') == [
        'text/html', 'application/json', 'text/plain'
    ]
    assert best_matches(['image/png'], 'text/html') == []


def test_best_match_top_fitness_with_zero_quality():
    supported = ['text/html', 'image/png']
    header = 'text/html;q=0, */*;q=0.5'

    assert best_match(supported, header) == ''
    assert best_matches(supported, header) == []


def test_best_matches_agrees_with_best_match():
    supported = ['text/plain', 'application/json', 'text/html']
    header = 'text/*;q=0.5, application/json;q=0.8'

    assert best_matches(supported, header)[0] == best_match(supported, header) == 'application/json'


def test_fitness_and_quality_parsed_unnormalized_ranges():
    parsed_ranges = [
        MediaType(type='text', subtype='html'),
        MediaType(type='image', subtype='png', parameters={'q': '0.5'}),
        MediaType(type='text', subtype='plain', parameters={'q': 0}),
    ]

    assert fitness_and_quality_parsed('text/html', parsed_ranges) == (110, 1.0)
    assert fitness_and_quality_parsed('image/png', parsed_ranges) == (110, 0.5)
    assert fitness_and_quality_parsed('text/plain', parsed_ranges) == (110, 0.0)


def test_media_type_quality_of_integer_value():
    assert MediaType(type='text', subtype='html', parameters={'q': 1}).quality == 1.0
    assert MediaType(type='text', subtype='html', parameters={'q': 0}).quality == 0.0
    assert MediaType(type='text', subtype='html', parameters={'q': True}).quality is None
    assert MediaType(type='text', subtype='html', parameters={'q': '1'}).quality is None
