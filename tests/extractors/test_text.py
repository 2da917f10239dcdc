"""Tests for PlainTextExtractor."""

from recall.extractors import PlainTextExtractor


class TestPlainTextExtractor:
    def test_supported_types(self):
        extractor = PlainTextExtractor()
        assert extractor.supports("text/plain")
        assert extractor.supports("text/markdown; charset=utf-8")
        assert extractor.supports("text/csv")
        assert not extractor.supports("application/pdf")

    def test_decodes_utf8(self):
        assert PlainTextExtractor().extract("héllo ✓".encode()) == "héllo ✓"

    def test_invalid_bytes_replaced(self):
        assert PlainTextExtractor().extract(b"ok\xff") == "ok�"
