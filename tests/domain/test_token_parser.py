"""Tests for domain/token_parser.py — pure Python, no provider needed."""

import pytest

from socratic_coach.domain.models import ActionToken, ButtonsToken, TextToken
from socratic_coach.domain.token_parser import (
    ACTION_RE,
    BUTTONS_RE,
    coerce_duration,
    new_action_id,
    parse_message_tokens,
    strip_tokens,
)


class TestParseButtons:
    def test_buttons_alone(self):
        parsed = parse_message_tokens('<BUTTONS>["A","B"]</BUTTONS>')
        assert parsed.tokens == [ButtonsToken(options=["A", "B"])]

    def test_buttons_with_whitespace_inside_tags(self):
        parsed = parse_message_tokens('<BUTTONS>\n  ["Yes", "No"]\n</BUTTONS>')
        assert parsed.tokens == [ButtonsToken(options=["Yes", "No"])]

    def test_buttons_between_text(self):
        parsed = parse_message_tokens('How do you feel?\n<BUTTONS>["Sad", "Angry"]</BUTTONS>\nTake your time.')
        assert [t.type for t in parsed.tokens] == ["text", "buttons", "text"]
        assert parsed.tokens[0].content == "How do you feel?"
        assert parsed.tokens[2].content == "Take your time."

    def test_non_string_options_dropped(self):
        parsed = parse_message_tokens("Pick <BUTTONS>[1, 2]</BUTTONS> one")
        assert parsed.tokens == [TextToken(content="Pick"), TextToken(content="one")]

    def test_single_quoted_options_dropped(self):
        parsed = parse_message_tokens("<BUTTONS>['A', 'B']</BUTTONS>")
        assert parsed.tokens == [TextToken(content="")]


class TestParseAction:
    def test_action_between_text(self):
        parsed = parse_message_tokens('Hello <ACTION>{"title":"X"}</ACTION> world')
        assert len(parsed.tokens) == 3
        assert parsed.tokens[0] == TextToken(content="Hello")
        assert parsed.tokens[2] == TextToken(content="world")
        token = parsed.tokens[1]
        assert isinstance(token, ActionToken)
        assert token.action.title == "X"
        assert token.action.duration == 5
        assert token.action.category == "action"
        assert token.action.description == ""
        assert token.action.limiting_belief == ""

    def test_all_fields_read(self):
        text = (
            '<ACTION>{"title": "Write it", "description": "Journal", "duration": 3, '
            '"category": "reflection", "limitingBelief": "I am not enough"}</ACTION>'
        )
        action = parse_message_tokens(text).tokens[0].action
        assert action.title == "Write it"
        assert action.description == "Journal"
        assert action.duration == 3
        assert action.category == "reflection"
        assert action.limiting_belief == "I am not enough"

    def test_unknown_category_takes_default(self):
        action = parse_message_tokens('<ACTION>{"category": "nonsense"}</ACTION>').tokens[0].action
        assert action.category == "action"

    def test_category_case_normalised(self):
        action = parse_message_tokens('<ACTION>{"category": " Planning "}</ACTION>').tokens[0].action
        assert action.category == "planning"

    def test_empty_object_gets_defaults(self):
        action = parse_message_tokens("<ACTION>{}</ACTION>").tokens[0].action
        assert action.title == "Take Action"
        assert action.duration == 5

    def test_id_is_generated_not_read(self):
        action = parse_message_tokens('<ACTION>{"id": "fixed", "title": "X"}</ACTION>').tokens[0].action
        assert action.id != "fixed"
        assert action.id.startswith("action-")

    def test_reparse_yields_fresh_ids(self):
        text = 'Try this <ACTION>{"title": "X"}</ACTION>'
        first = parse_message_tokens(text).tokens[1].action
        second = parse_message_tokens(text).tokens[1].action
        assert first.title == second.title
        assert first.id != second.id

    def test_invalid_payload_drops_only_that_token(self):
        parsed = parse_message_tokens("Before <ACTION>{title: X}</ACTION> after")
        assert parsed.tokens == [TextToken(content="Before"), TextToken(content="after")]

    def test_invalid_payload_keeps_other_tokens(self):
        text = 'One <ACTION>{broken}</ACTION> two <BUTTONS>["A"]</BUTTONS> three'
        parsed = parse_message_tokens(text)
        assert parsed.tokens == [
            TextToken(content="One"),
            TextToken(content="two"),
            ButtonsToken(options=["A"]),
            TextToken(content="three"),
        ]


class TestOrderingAndText:
    def test_tokens_in_offset_order(self):
        text = 'A <ACTION>{"title": "T"}</ACTION> B <BUTTONS>["x"]</BUTTONS> C'
        parsed = parse_message_tokens(text)
        assert [t.type for t in parsed.tokens] == ["text", "action", "text", "buttons", "text"]

    def test_buttons_before_action_in_text(self):
        text = '<BUTTONS>["x"]</BUTTONS><ACTION>{"title": "T"}</ACTION>'
        parsed = parse_message_tokens(text)
        assert [t.type for t in parsed.tokens] == ["buttons", "action"]

    def test_plain_text(self):
        parsed = parse_message_tokens("  just some words  ")
        assert parsed.tokens == [TextToken(content="just some words")]

    def test_empty_input(self):
        parsed = parse_message_tokens("")
        assert parsed.tokens == [TextToken(content="")]

    def test_whitespace_input(self):
        parsed = parse_message_tokens("   \n\t ")
        assert parsed.tokens == [TextToken(content="")]

    def test_raw_content_preserved(self):
        raw = '  Hi <BUTTONS>["a"]</BUTTONS>  '
        assert parse_message_tokens(raw).raw_content == raw

    def test_unclosed_tag_is_text(self):
        parsed = parse_message_tokens('Hi <ACTION>{"title": "X"}')
        assert parsed.tokens == [TextToken(content='Hi <ACTION>{"title": "X"}')]


class TestCoerceDuration:
    @pytest.mark.parametrize("value,expected", [
        (None, 5), (0, 5), ("", 5), (10, 10), ("7", 7), ("soon", 5), (-3, 5), (True, 5),
    ])
    def test_values(self, value, expected):
        assert coerce_duration(value) == expected


class TestStripTokens:
    def test_strips_all(self):
        text = 'Hi <BUTTONS>["a"]</BUTTONS> and <ACTION>{"title": "x"}</ACTION> bye'
        assert strip_tokens(text) == "Hi  and  bye"

    def test_no_tokens(self):
        assert strip_tokens("just text") == "just text"


class TestPatterns:
    def test_buttons_regex_is_lazy(self):
        text = '<BUTTONS>["a"]</BUTTONS> mid <BUTTONS>["b"]</BUTTONS>'
        assert len(BUTTONS_RE.findall(text)) == 2

    def test_action_regex_multiline(self):
        assert ACTION_RE.search('<ACTION>\n{\n"title": "x"\n}\n</ACTION>')

    def test_new_action_id_unique(self):
        assert new_action_id() != new_action_id()
