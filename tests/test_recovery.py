"""
Tests for parser options and panic-mode error recovery.
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from mirrow.lexer import Lexer
from mirrow.parser import (
    LetStmt, ParseMode, Parser, ParserOptions, PARSER_ERROR_CODES, parse_source
)


RECOVER = ParserOptions(recover=True)


class TestParserOptions(unittest.TestCase):

    def test_defaults(self):
        options = ParserOptions()
        self.assertFalse(options.recover)
        self.assertEqual(options.max_arguments, 255)
        self.assertEqual(options.filename, "<string>")
        self.assertEqual(options.mode, ParseMode.STRICT)

    def test_for_mode(self):
        self.assertTrue(ParserOptions.for_mode(ParseMode.RECOVER).recover)
        self.assertFalse(ParserOptions.for_mode(ParseMode.STRICT).recover)
        self.assertEqual(ParserOptions.for_mode("recover").mode, ParseMode.RECOVER)

    def test_for_mode_overrides(self):
        options = ParserOptions.for_mode(ParseMode.RECOVER, filename="a.mw")
        self.assertTrue(options.recover)
        self.assertEqual(options.filename, "a.mw")

    def test_options_are_frozen(self):
        with self.assertRaises(Exception):
            ParserOptions().recover = True

    def test_filename_argument_overrides_options(self):
        result = parse_source("(", "b.mw", ParserOptions(filename="a.mw"))
        self.assertEqual(result.errors[0].diagnostic.location.filename, "b.mw")

        result = parse_source("(", options=ParserOptions(filename="a.mw"))
        self.assertEqual(result.errors[0].diagnostic.location.filename, "a.mw")

    def test_error_codes_are_documented(self):
        result = parse_source('let = "open', options=RECOVER)
        for error in result.errors:
            self.assertIn(error.code, PARSER_ERROR_CODES)


class TestRecovery(unittest.TestCase):
    """With recover=True the parser resumes at the next statement boundary."""

    SOURCE = "let a = );\nlet b = 2\nlet c = (;\nlet d = 4"

    def names(self, program):
        return [stmt.name.lexeme for stmt in program if isinstance(stmt, LetStmt)]

    def test_single_shot_by_default(self):
        result = parse_source(self.SOURCE)
        self.assertEqual(len(result.errors), 1)
        self.assertEqual(len(result.program), 0)

    def test_collects_errors_and_keeps_good_statements(self):
        result = parse_source(self.SOURCE, options=RECOVER)
        self.assertFalse(result.success)
        self.assertEqual([e.line for e in result.errors], [1, 3])
        self.assertEqual(self.names(result.program), ["b", "d"])

    def test_resumes_at_declaration_keyword(self):
        source = 'let x = 1 +\nfunc f() { 1 }\nimport "m"\nmatch y { _ -> 0 }'
        result = parse_source(source, options=RECOVER)
        self.assertEqual(len(result.errors), 1)
        self.assertEqual(len(result.program), 2)

    def test_skips_lexical_errors(self):
        result = parse_source("let a = 1 @ 2\nlet b = 3", options=RECOVER)
        self.assertEqual([e.message for e in result.errors], ["Unexpected character."])
        self.assertEqual(self.names(result.program), ["a", "b"])

    def test_lexical_error_between_statements(self):
        result = parse_source("let a = 1\n@\nlet b = 2", options=RECOVER)
        self.assertEqual(self.names(result.program), ["a", "b"])
        self.assertEqual([e.line for e in result.errors], [2])

    def test_lexical_error_inside_statement_drops_it(self):
        result = parse_source("let a = @\nlet b = 2", options=RECOVER)
        self.assertEqual(self.names(result.program), ["b"])
        self.assertEqual(result.errors[0].code, "P000")

    def test_consecutive_bad_tokens_report_once(self):
        result = parse_source("let a = 1 @ # @ & 2\nlet b = 3", options=RECOVER)
        self.assertEqual(len(result.errors), 1)
        self.assertEqual(self.names(result.program), ["a", "b"])

    def test_resumes_at_enum(self):
        result = parse_source("let a = )\nenum E { A }\nlet b = 1", options=RECOVER)
        self.assertEqual(len(result.errors), 1)
        self.assertEqual(len(result.program), 2)

    def test_error_in_first_token(self):
        result = parse_source("@ let a = 1", options=RECOVER)
        self.assertEqual(len(result.errors), 1)
        self.assertEqual(self.names(result.program), ["a"])

    def test_error_at_end_of_input(self):
        result = parse_source("let a = 1\nlet b =", options=RECOVER)
        self.assertEqual(len(result.errors), 1)
        self.assertEqual(self.names(result.program), ["a"])

    def test_logs_every_reported_error(self):
        with self.assertLogs("mirrow.parser", level="ERROR") as cm:
            Parser(Lexer(self.SOURCE), RECOVER).parse()
        self.assertEqual(len(cm.output), 2)

    def test_parser_state_after_recovery(self):
        parser = Parser(Lexer(self.SOURCE), RECOVER)
        parser.parse()
        self.assertTrue(parser.had_error)
        self.assertFalse(parser.panic_mode)
        self.assertEqual(len(parser.errors), 2)


if __name__ == '__main__':
    unittest.main()
