"""
Unit tests for query, multipart and validation-error encoding.
"""

import json

import pytest

from rest_client.app.encoding import build_url, choose_boundary, encode_multipart, flatten_errors, urlencode


class TestQueryEncoding:
    """Test cases for urlencode and build_url."""

    def test_urlencode_escapes_non_alphanumerics(self):
        """Every non-alphanumeric byte becomes uppercase %XX."""
        assert urlencode("a b") == "a%20b"
        assert urlencode("a-b_c.d~") == "a%2Db%5Fc%2Ed%7E"
        assert urlencode("abcXYZ019") == "abcXYZ019"

    def test_urlencode_utf8(self):
        """Multi-byte characters are encoded byte by byte."""
        assert urlencode("\N{THUMBS UP SIGN}") == "%F0%9F%91%8D"
        assert urlencode("é") == "%C3%A9"

    def test_urlencode_non_strings(self):
        """Numbers and booleans are rendered before encoding."""
        assert urlencode(7) == "7"
        assert urlencode(True) == "true"
        assert urlencode(False) == "false"

    def test_build_url_query(self):
        """Query pairs each appear once, joined by ? then &."""
        url = build_url("https://api/v10/channels/1/messages", {"q": "a b", "id": 7})
        query = url.split("?", 1)[1]

        assert url.count("?") == 1
        assert sorted(query.split("&")) == ["id=7", "q=a%20b"]
        assert "?q=a%20b" in url or "&q=a%20b" in url
        assert "?id=7" in url or "&id=7" in url

    def test_build_url_keeps_order_of_pairs(self):
        """Ordered pairs are emitted in the order given."""
        url = build_url("/x", [("limit", 50), ("before", "123")])
        assert url == "/x?limit=50&before=123"

    def test_build_url_without_query(self):
        """No query leaves the URL untouched."""
        assert build_url("/x") == "/x"
        assert build_url("/x", {}) == "/x"
        assert build_url("/x", []) == "/x"


class TestMultipartEncoding:
    """Test cases for choose_boundary and encode_multipart."""

    def test_choose_boundary_extends_on_collision(self):
        """A candidate found in an attachment is extended until it is absent."""
        data = b"\x89PNG...abc...abc0abc1abc2abc3abc4abc5abc6abc7abc8abc9abca"
        boundary = choose_boundary([data], candidate="abc")

        assert boundary.startswith("abc")
        assert len(boundary) > 3
        assert boundary.encode() not in data

    def test_choose_boundary_keeps_free_candidate(self):
        """A candidate absent from every part is used as is."""
        assert choose_boundary([b"hello", b"world"], candidate="zzz") == "zzz"

    def test_encode_selects_boundary_absent_from_attachments(self):
        """The chosen boundary only appears as a delimiter in the body."""
        content = b"--abc\r\nabc"
        body, boundary = encode_multipart('{"content":"hi"}', [("a.png", content)], boundary="abc")

        assert boundary.encode() not in content
        delimiter = b"--" + boundary.encode()
        # two opening delimiters plus the closing one
        assert body.count(delimiter) == 3

    def test_encode_layout(self):
        """The payload part comes first, then one part per file, CRLF separated."""
        payload = json.dumps({"content": "see attached"})
        body, boundary = encode_multipart(payload, [("a.png", b"PNGDATA"), ("b.txt", "text")], boundary="XyZ")

        expected = b"\r\n".join([
            b"--XyZ",
            b'Content-Disposition: form-data; name="payload_json"',
            b"Content-Type: application/json",
            b"",
            payload.encode(),
            b"--XyZ",
            b'Content-Disposition: form-data; name="file1"; filename="a.png"',
            b"Content-Type: application/octet-stream",
            b"",
            b"PNGDATA",
            b"--XyZ",
            b'Content-Disposition: form-data; name="file2"; filename="b.txt"',
            b"Content-Type: application/octet-stream",
            b"",
            b"text",
            b"--XyZ--",
        ])
        assert boundary == "XyZ"
        assert body == expected

    def test_encode_quotes_filenames(self):
        """Quotes in filenames are escaped."""
        body, _ = encode_multipart("{}", [('we"ird.bin', b"x")], boundary="B")
        assert b'filename="we\\"ird.bin"' in body

    def test_default_boundary_is_random(self):
        """Without a candidate each call picks its own boundary."""
        _, first = encode_multipart("{}", [("a", b"x")])
        _, second = encode_multipart("{}", [("a", b"x")])

        assert first != second
        assert len(first) >= 16


class TestFlattenErrors:
    """Test cases for flatten_errors."""

    def test_single_field(self):
        """A leaf under one field renders as code in field : message."""
        tree = {"name": {"_errors": [{"code": "BASE_TYPE_REQUIRED", "message": "required"}]}}
        assert flatten_errors(tree) == "BASE_TYPE_REQUIRED in name : required"

    def test_nested_paths(self):
        """Nested keys render as dotted, indexed or quoted paths."""
        tree = {
            "embeds": {
                "0": {
                    "fields": {
                        "2": {"value": {"_errors": [{"code": "BASE_TYPE_MAX_LENGTH", "message": "too long"}]}},
                    },
                    "odd-key": {"_errors": [{"code": "X", "message": "bad"}]},
                },
            },
        }
        lines = flatten_errors(tree).split("\n\t")

        assert "BASE_TYPE_MAX_LENGTH in embeds[0].fields[2].value : too long" in lines
        assert 'X in embeds[0]["odd-key"] : bad' in lines
        assert len(lines) == 2

    def test_multiple_errors_on_one_leaf(self):
        """Each leaf error gets its own line."""
        tree = {"content": {"_errors": [
            {"code": "A", "message": "first"},
            {"code": "B", "message": "second"},
        ]}}
        assert flatten_errors(tree) == "A in content : first\n\tB in content : second"

    def test_root_level_errors(self):
        """Errors on the body itself are reported against the payload."""
        tree = {"_errors": [{"code": "DICT_TYPE_CONVERT", "message": "Only dictionaries may be used"}]}
        assert flatten_errors(tree) == "DICT_TYPE_CONVERT in payload : Only dictionaries may be used"

    def test_non_ascii_digit_keys_are_quoted(self):
        """Unicode digits are not list indices and render as quoted keys."""
        tree = {"sizes": {
            "\u00b2": {"_errors": [{"code": "C", "message": "superscript"}]},
            "\u0663": {"_errors": [{"code": "D", "message": "arabic-indic"}]},
        }}
        lines = flatten_errors(tree).split("\n\t")

        assert lines == [
            'C in sizes["\\u00b2"] : superscript',
            'D in sizes["\\u0663"] : arabic-indic',
        ]

    def test_empty_tree(self):
        """An empty tree flattens to an empty string."""
        assert flatten_errors({}) == ""
