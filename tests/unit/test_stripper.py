"""Unit tests for g4lens.grammar.stripper."""
from __future__ import annotations

import pytest

from g4lens.grammar.stripper import strip, strip_comments, strip_headers


class TestStripComments:
    def test_line_comment(self) -> None:
        assert strip_comments("a // c\nb") == "a \nb"

    def test_block_comment(self) -> None:
        assert strip_comments("/* x */a") == "a"

    def test_multiline_block_comment(self) -> None:
        assert strip_comments("a /* one\ntwo */ b") == "a  b"

    def test_several_block_comments(self) -> None:
        assert strip_comments("/* a */ b /* c */") == " b "

    def test_unterminated_block_swallows_rest(self) -> None:
        assert strip_comments("a /* b\nc : D ;") == "a "


class TestStripHeaders:
    @pytest.mark.parametrize(
        "header",
        [
            "grammar T;",
            "lexer grammar L;",
            "parser grammar P;",
            "options { a = {b}; }",
            "tokens { A, B }",
            "channels { COMMENTS }",
            "@header { package x; }",
            "@parser::members { int x; }",
            "import A, B;",
            "mode STR;",
        ],
    )
    def test_header_is_removed(self, header: str) -> None:
        assert strip_headers(f"{header}\nr : X ;") == "\nr : X ;"

    def test_several_named_actions(self) -> None:
        assert strip_headers("@header {a}\n@members {b}\nr : X ;") == "\n\nr : X ;"

    def test_rules_after_mode_survive(self) -> None:
        assert strip_headers("mode STR;\nX : 'x' ;\nY : 'y' ;") == "\nX : 'x' ;\nY : 'y' ;"


class TestStrip:
    def test_comments_then_headers(self) -> None:
        assert strip("grammar T; // c\n/* b */r : X ;") == " \nr : X ;"

    def test_comment_only_input_is_blank(self) -> None:
        assert strip("// just a comment").strip() == ""

    def test_empty_input(self) -> None:
        assert strip("") == ""
