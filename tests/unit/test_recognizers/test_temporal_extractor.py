"""
Unit tests for the TemporalExtractor component.

Tests coverage scoring, first-match selection, failure capture and the
dateparser-backed parser's span and range handling.
"""

import logging
from datetime import datetime

import pytest

from dialogentities.core.config_manager import TemporalConfig
from dialogentities.core.error_handler import TemporalParseError
from dialogentities.recognizers.entities import DurationResolution, EntityType
from dialogentities.recognizers.temporal_extractor import (
    DateparserTemporalParser,
    ParsedTemporal,
    RecognitionStatus,
    TemporalExtractor,
    recognize_time
)


SEARCH_DATES = "dialogentities.recognizers.temporal_extractor.search_dates"


class TestTemporalExtractor:
    """Test suite for TemporalExtractor component"""

    def test_first_match_becomes_duration_entity(self, stub_parser_factory):
        """Test entity fields built from the parser's first match"""
        start = datetime(2026, 10, 20, 17, 0)
        parser = stub_parser_factory([
            ParsedTemporal(text="tomorrow at 5pm", index=10, start=start),
            ParsedTemporal(text="friday", index=30, start=datetime(2026, 10, 23)),
        ])
        utterance = "remind me tomorrow at 5pm"

        recognition = TemporalExtractor(parser).recognize(utterance)

        assert recognition.status is RecognitionStatus.MATCHED
        entity = recognition.entity
        assert entity.type == EntityType.DURATION
        assert entity.text == "tomorrow at 5pm"
        assert entity.start_index == 10
        assert entity.end_index == 25
        assert entity.score == pytest.approx(15 / 25)
        assert entity.resolution == DurationResolution(start=start)
        assert entity.resolution.end is None
        assert entity.resolution.ref is None

    def test_end_and_ref_carried_when_present(self, stub_parser_factory):
        """Test optional end and reference timestamps"""
        ref = datetime(2026, 10, 19, 9, 0)
        match = ParsedTemporal(
            text="3pm to 5pm", index=0,
            start=datetime(2026, 10, 19, 15), end=datetime(2026, 10, 19, 17), ref=ref,
        )

        entity = TemporalExtractor(stub_parser_factory([match])).recognize("3pm to 5pm", ref).entity

        assert entity.resolution.end == datetime(2026, 10, 19, 17)
        assert entity.resolution.ref == ref
        assert entity.score == 1.0

    def test_reference_date_passed_to_parser(self, stub_parser_factory):
        """Test the anchor reaches the parser"""
        parser = stub_parser_factory()
        ref = datetime(2026, 1, 1)

        TemporalExtractor(parser).recognize("next week", ref)

        assert parser.calls == [("next week", ref)]

    def test_no_match(self, stub_parser_factory):
        """Test utterances without temporal expressions"""
        recognition = TemporalExtractor(stub_parser_factory()).recognize("I want pizza")

        assert recognition.status is RecognitionStatus.NO_MATCH
        assert recognition.entity is None
        assert recognition.diagnostic is None

    @pytest.mark.parametrize("utterance", ["", "   "])
    def test_blank_utterance_skips_parser(self, stub_parser_factory, utterance):
        """Test blank input never reaches the parser"""
        parser = stub_parser_factory()

        recognition = TemporalExtractor(parser).recognize(utterance)

        assert recognition.status is RecognitionStatus.NO_MATCH
        assert parser.calls == []

    def test_parser_failure_is_captured(self, stub_parser_factory):
        """Test parser exceptions become a FAILED recognition"""
        parser = stub_parser_factory(error=RuntimeError("locale data missing"))

        recognition = TemporalExtractor(parser).recognize("tomorrow")

        assert recognition.status is RecognitionStatus.FAILED
        assert recognition.entity is None
        assert isinstance(recognition.error, TemporalParseError)
        assert recognition.error.utterance == "tomorrow"
        assert "locale data missing" in recognition.diagnostic

    def test_recognize_time_logs_failure(self, stub_parser_factory, caplog):
        """Test module helper returns None and logs the diagnostic"""
        parser = stub_parser_factory(error=ValueError("bad input"))

        with caplog.at_level(logging.WARNING, logger="dialogentities"):
            assert recognize_time("tomorrow", parser=parser) is None

        assert "Error recognizing time: bad input" in caplog.text


class TestDateparserTemporalParser:
    """Test suite for the dateparser-backed parser"""

    def test_spans_located_in_order(self, mocker):
        """Test match offsets are found left to right"""
        first, second = datetime(2026, 10, 20), datetime(2026, 10, 23)
        mocker.patch(SEARCH_DATES, return_value=[("Tomorrow", first), ("friday", second)])

        matches = DateparserTemporalParser().parse("Tomorrow or friday")

        assert [(m.text, m.index) for m in matches] == [("Tomorrow", 0), ("friday", 12)]
        assert matches[0].start == first

    def test_no_hits(self, mocker):
        """Test search_dates returning None"""
        mocker.patch(SEARCH_DATES, return_value=None)

        assert DateparserTemporalParser().parse("hello there") == []

    def test_range_is_merged(self, mocker):
        """Test two dates joined by a range connector become start and end"""
        start, end = datetime(2026, 10, 19, 15), datetime(2026, 10, 19, 17)
        mocker.patch(SEARCH_DATES, return_value=[("3pm", start), ("5pm", end)])

        matches = DateparserTemporalParser().parse("meet 3pm to 5pm")

        assert len(matches) == 1
        assert matches[0].text == "3pm to 5pm"
        assert matches[0].index == 5
        assert (matches[0].start, matches[0].end) == (start, end)

    def test_range_detection_can_be_disabled(self, mocker):
        """Test detect_ranges=False keeps both matches"""
        mocker.patch(SEARCH_DATES, return_value=[
            ("3pm", datetime(2026, 10, 19, 15)), ("5pm", datetime(2026, 10, 19, 17))
        ])

        matches = DateparserTemporalParser(TemporalConfig(detect_ranges=False)).parse("meet 3pm to 5pm")

        assert [m.text for m in matches] == ["3pm", "5pm"]
        assert matches[0].end is None

    def test_unrelated_dates_not_merged(self, mocker):
        """Test dates separated by other words stay apart"""
        mocker.patch(SEARCH_DATES, return_value=[
            ("monday", datetime(2026, 10, 19)), ("friday", datetime(2026, 10, 23))
        ])

        matches = DateparserTemporalParser().parse("monday and also friday")

        assert len(matches) == 2

    def test_settings_passed_to_search_dates(self, mocker):
        """Test languages, preference and a naive relative base"""
        search = mocker.patch(SEARCH_DATES, return_value=None)
        config = TemporalConfig(languages=["en", "fr"], prefer_dates_from="future")
        ref = datetime(2026, 10, 19, 14, 30)

        DateparserTemporalParser(config).parse("demain", ref)

        _, kwargs = search.call_args
        assert kwargs["languages"] == ["en", "fr"]
        assert kwargs["settings"]["PREFER_DATES_FROM"] == "future"
        assert kwargs["settings"]["RELATIVE_BASE"] == ref

    def test_ref_recorded_on_matches(self, mocker):
        """Test the caller's anchor is reported on each match"""
        mocker.patch(SEARCH_DATES, return_value=[("tomorrow", datetime(2026, 10, 20))])
        ref = datetime(2026, 10, 19, 9)

        matches = DateparserTemporalParser().parse("tomorrow", ref)

        assert matches[0].ref == ref
