"""Tests for common utilities."""

import json
import logging

import pytest
from ushort.lib.common.validators import is_valid_url, is_valid_short_code, MAX_URL_LENGTH
from ushort.lib.common.headers import ForwardedHeaders
from ushort.lib.common.logging_config import (
    EventJsonFormatter,
    format_fields,
    get_logger,
    log_event,
    INVALID_URL,
    URL_CREATED,
)
from ushort.lib.common.url_builder import build_short_url, normalize_path_prefix
from ushort.web_app.html_prefix import inject_forwarded_prefix_into_html


class TestValidators:
    """Test validation utilities."""

    def test_valid_urls(self):
        """Test valid URL validation."""
        valid, _ = is_valid_url("https://example.com")
        assert valid

        valid, _ = is_valid_url("http://example.com/path")
        assert valid

        valid, _ = is_valid_url("  https://sub.example.com:8080/path?query=value  ")
        assert valid

    def test_invalid_urls(self):
        """Test invalid URL validation."""
        valid, error = is_valid_url("")
        assert not valid
        assert "required" in error.lower()

        valid, error = is_valid_url("   ")
        assert not valid

        valid, error = is_valid_url(None)
        assert not valid

        valid, error = is_valid_url("not-a-url")
        assert not valid

        valid, error = is_valid_url("ftp://example.com")
        assert not valid
        assert "http" in error.lower()

    def test_url_length_limit(self):
        """URLs up to the limit pass, longer ones fail."""
        base = "https://example.com/"
        at_limit = base + "a" * (MAX_URL_LENGTH - len(base))
        valid, _ = is_valid_url(at_limit)
        assert valid

        valid, error = is_valid_url(at_limit + "a")
        assert not valid
        assert "too long" in error

    def test_valid_short_codes(self):
        """Test valid short code validation."""
        valid, _ = is_valid_short_code("abc123")
        assert valid

        valid, _ = is_valid_short_code("ABCdef12")
        assert valid

    def test_invalid_short_codes(self):
        """Test invalid short code validation."""
        valid, error = is_valid_short_code("")
        assert not valid

        valid, error = is_valid_short_code("test-code")
        assert not valid
        assert "letters and numbers" in error

        valid, error = is_valid_short_code("a" * 65)
        assert not valid


class TestForwardedHeaders:
    """Test proxy header parsing."""

    def test_parse(self):
        """All proxy headers are read, ignoring case."""
        forwarded = ForwardedHeaders.parse({
            "X-Forwarded-Proto": "https",
            "x-forwarded-host": "sho.rt",
            "X-Forwarded-For": "192.168.1.1",
            "X-Real-IP": "10.0.0.9",
            "X-Forwarded-Prefix": "/s/",
        })

        assert forwarded == ForwardedHeaders(
            proto="https",
            host="sho.rt",
            client_chain=("192.168.1.1",),
            real_ip="10.0.0.9",
            prefix="/s",
        )

    def test_parse_empty(self):
        assert ForwardedHeaders.parse({}) == ForwardedHeaders()

    def test_chained_proxies_keep_first_hop(self):
        """Appended proto/host values from later proxies are ignored."""
        forwarded = ForwardedHeaders.parse({
            "X-Forwarded-Proto": "https, http",
            "X-Forwarded-Host": "sho.rt, internal:8080",
            "X-Forwarded-For": "203.0.113.5, 10.0.0.1, ,",
        })

        assert forwarded.base_url("http://localhost:8080") == "https://sho.rt"
        assert forwarded.client_chain == ("203.0.113.5", "10.0.0.1")

    def test_base_url_from_request(self):
        """Without both forwarded values the request scheme and host are used."""
        forwarded = ForwardedHeaders.parse({"X-Forwarded-Proto": "https"})

        base_url = forwarded.base_url(
            "http://localhost:8080",
            request_scheme="http",
            request_host="example.com",
        )
        assert base_url == "http://example.com"

    def test_base_url_fallback(self):
        assert ForwardedHeaders().base_url("http://localhost:8080/") == "http://localhost:8080"

    @pytest.mark.parametrize("headers,remote,expected", [
        ({"X-Forwarded-For": "203.0.113.5, 10.0.0.1"}, "127.0.0.1", "203.0.113.5"),
        ({"x-forwarded-for": " 198.51.100.7 "}, None, "198.51.100.7"),
        ({"X-Real-IP": "192.0.2.44"}, "127.0.0.1", "192.0.2.44"),
        ({"X-Forwarded-For": "203.0.113.5", "X-Real-IP": "192.0.2.44"}, None, "203.0.113.5"),
        ({"X-Forwarded-For": " , "}, "127.0.0.1", "127.0.0.1"),
        ({}, "127.0.0.1", "127.0.0.1"),
        ({}, None, "unknown"),
    ])
    def test_client_ip(self, headers, remote, expected):
        """Forwarded-For wins, then X-Real-IP, then the peer address."""
        assert ForwardedHeaders.parse(headers).client_ip(remote) == expected

    @pytest.mark.parametrize("value,expected", [
        ("/s/", "/s"),
        ("s", "/s"),
        ("/", ""),
        ("", ""),
    ])
    def test_prefix(self, value, expected):
        """Prefix is normalized to a leading slash with no trailing slash."""
        assert ForwardedHeaders.parse({"X-Forwarded-Prefix": value}).prefix == expected


class TestLogEvents:
    """Test structured service events."""

    def test_format_fields(self):
        assert format_fields(shortCode="abc123", newAccessCount=2) == "shortCode=abc123, newAccessCount=2"

    def test_log_event_message_and_record(self, caplog):
        """Fields appear in the message and stay on the record."""
        logger = get_logger("tests.events")

        with caplog.at_level(logging.INFO, logger="ushort"):
            log_event(logger, logging.INFO, URL_CREATED, shortCode="abc123", originalUrl="https://example.com")

        record = caplog.records[-1]
        assert record.name == "ushort.tests.events"
        assert record.getMessage() == "URL created: shortCode=abc123, originalUrl=https://example.com"
        assert record.event == URL_CREATED
        assert record.fields == {"shortCode": "abc123", "originalUrl": "https://example.com"}

    def test_log_event_below_level_is_skipped(self, caplog):
        logger = get_logger("tests.events")

        with caplog.at_level(logging.WARNING, logger="ushort"):
            log_event(logger, logging.INFO, URL_CREATED, shortCode="abc123")

        assert not [r for r in caplog.records if getattr(r, "event", None) == URL_CREATED]

    def test_json_formatter_output_is_valid_json(self):
        """Quotes in URLs do not break the JSON line; fields are nested."""
        record = logging.LogRecord(
            "ushort.lib.service", logging.WARNING, __file__, 1,
            'Invalid URL provided: url="x"', None, None,
        )
        record.event = INVALID_URL
        record.fields = {"url": '"x"', "reason": "URL must start with http:// or https://"}

        payload = json.loads(EventJsonFormatter().format(record))

        assert payload["level"] == "WARNING"
        assert payload["logger"] == "ushort.lib.service"
        assert payload["message"] == 'Invalid URL provided: url="x"'
        assert payload["event"] == INVALID_URL
        assert payload["fields"]["url"] == '"x"'

    def test_json_formatter_plain_record(self):
        record = logging.LogRecord("ushort", logging.INFO, __file__, 1, "Service stopped", None, None)

        payload = json.loads(EventJsonFormatter().format(record))

        assert payload["message"] == "Service stopped"
        assert "event" not in payload

    def test_get_logger_prefixes_names(self):
        assert get_logger("web").name == "ushort.web"
        assert get_logger("ushort.web").name == "ushort.web"
        assert get_logger().name == "ushort"


class TestURLBuilder:
    """Test URL builder utilities."""

    def test_build_short_url_no_prefix(self):
        """Test building short URL without prefix."""
        url = build_short_url("abc123", "https://short.link")
        assert url == "https://short.link/abc123"

    def test_build_short_url_with_prefix(self):
        """Test building short URL with prefix."""
        url = build_short_url("abc123", "https://short.link", "/s")
        assert url == "https://short.link/s/abc123"

    def test_build_short_url_trailing_slash(self):
        """Test building short URL with trailing slash in base."""
        url = build_short_url("abc123", "https://short.link/", "s/")
        assert url == "https://short.link/s/abc123"

    def test_normalize_path_prefix(self):
        """Test path prefix normalization."""
        assert normalize_path_prefix("") == ""
        assert normalize_path_prefix("s") == "/s"
        assert normalize_path_prefix("/s/") == "/s"


class TestHtmlPrefix:
    """Test prefix injection into rendered pages."""

    def test_no_prefix_leaves_html(self):
        html = '<form action="create"><a href="..">back</a></form>'
        assert inject_forwarded_prefix_into_html(html, "") == html

    def test_prefix_rewrites_relative_links(self):
        html = '<form action="create"><a href="..">back</a></form>'
        result = inject_forwarded_prefix_into_html(html, "/s")
        assert 'action="/s/create"' in result
        assert 'href="/s/"' in result
