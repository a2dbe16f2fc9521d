"""
Word splitting and pipeline parsing tests.

Run with: python -m pytest tests/test_parser.py -v
"""

import unittest

from pipeshell.exceptions import (
    ShellSyntaxError,
    UnterminatedQuoteError,
    PipelineSyntaxError,
    RedirectionSyntaxError,
)
from pipeshell.shell.lexer import Word, WordSplitter
from pipeshell.shell.parser import (
    PipelineParser,
    Pipeline,
    Stage,
    Redirection,
    RedirectMode,
)


class TestWordSplitter(unittest.TestCase):
    """Test splitting raw lines into words."""

    def setUp(self):
        self.splitter = WordSplitter()

    def test_whitespace(self):
        """Runs of whitespace separate words."""
        self.assertEqual(self.splitter.split("  ls   -la\t/tmp "), ["ls", "-la", "/tmp"])

    def test_quotes_and_pipe_inside_quotes(self):
        """Quoted text keeps spaces and pipes."""
        words = self.splitter.split("""echo "a b" 'c|d' 1>out.txt""")
        self.assertEqual(words, ["echo", "a b", "c|d", "1>", "out.txt"])
        self.assertTrue(words[2].quoted)
        self.assertFalse(words[3].quoted)

    def test_single_quotes_are_literal(self):
        """Backslashes mean nothing inside single quotes."""
        self.assertEqual(self.splitter.split(r"echo 'a\"b\\c'"), ["echo", r'a\"b\\c'])

    def test_double_quote_escapes(self):
        """Inside double quotes only \\" and \\\\ are escapes."""
        words = self.splitter.split(r'echo "a\"b" "c\\d" "e\nf"')
        self.assertEqual(words, ["echo", 'a"b', "c\\d", "e\\nf"])

    def test_unquoted_backslash(self):
        """An unquoted backslash escapes the next character."""
        words = self.splitter.split(r"echo a\ b \| \>")
        self.assertEqual(words, ["echo", "a b", "|", ">"])
        self.assertTrue(all(w.quoted for w in words[1:]))

    def test_adjacent_parts_join(self):
        """Quoted and unquoted parts with no space between form one word."""
        self.assertEqual(self.splitter.split("""echo a'b c'"d"e"""), ["echo", "ab cde"])

    def test_empty_quotes(self):
        """'' is an empty word, not nothing."""
        self.assertEqual(self.splitter.split("echo '' \"\""), ["echo", "", ""])

    def test_pipe_is_isolated(self):
        """An unquoted pipe never sticks to a neighbouring word."""
        self.assertEqual(self.splitter.split("ls|wc -l"), ["ls", "|", "wc", "-l"])

    def test_redirection_operators(self):
        """Operators are split out and fd numbers join them."""
        self.assertEqual(
            self.splitter.split("cmd >a >>b 1>c 1>>d 2>e 2>>f"),
            ["cmd", ">", "a", ">>", "b", "1>", "c", "1>>", "d", "2>", "e", "2>>", "f"]
        )

    def test_digit_inside_word_is_not_fd(self):
        """Only a bare 1 or 2 joins the operator."""
        self.assertEqual(self.splitter.split("echo a2>f"), ["echo", "a2", ">", "f"])
        self.assertEqual(self.splitter.split("echo 3>f"), ["echo", "3", ">", "f"])
        self.assertEqual(self.splitter.split("echo '2'>f"), ["echo", "2", ">", "f"])

    def test_unterminated_quotes(self):
        """Unterminated quotes are syntax errors."""
        with self.assertRaises(UnterminatedQuoteError) as ctx:
            self.splitter.split("echo 'abc")
        self.assertEqual(ctx.exception.quote, "'")
        self.assertEqual(ctx.exception.position, 5)

        with self.assertRaises(SyntaxError):
            self.splitter.split('echo "abc')

    def test_word_is_a_str(self):
        """Words compare and hash like plain strings."""
        word = Word("abc", quoted=True)
        self.assertEqual(word, "abc")
        self.assertIn(word, {"abc"})
        self.assertIn("quoted=True", repr(word))


class TestPipelineParser(unittest.TestCase):
    """Test grouping words into stages."""

    def setUp(self):
        self.parser = PipelineParser()

    def test_single_command(self):
        """No pipe and no operator gives one stage without redirection."""
        pipeline = self.parser.parse_line("ls -la /tmp")
        self.assertEqual(pipeline.stages, (Stage("ls", ("-la", "/tmp")),))
        self.assertIsNone(pipeline.redirection)

    def test_quoted_pipe_does_not_split(self):
        """A pipe inside quotes is part of an argument."""
        pipeline = self.parser.parse_line("""echo "a b" 'c|d' 1>out.txt""")
        self.assertEqual(pipeline.stages, (Stage("echo", ("a b", "c|d")),))
        self.assertEqual(
            pipeline.redirection,
            Redirection(RedirectMode.OVERWRITE_STDOUT, "out.txt")
        )

    def test_three_stages(self):
        """Stages keep left-to-right order."""
        pipeline = self.parser.parse_line("cmd1 a | cmd2 | cmd3 b c > out")
        self.assertEqual([s.command for s in pipeline.stages], ["cmd1", "cmd2", "cmd3"])
        self.assertEqual(pipeline.stages[2].arguments, ("b", "c"))
        self.assertEqual(pipeline.redirection.target, "out")
        self.assertEqual(pipeline.last.command, "cmd3")

    def test_all_operator_modes(self):
        """Each operator maps to its mode."""
        cases = {
            ">": RedirectMode.OVERWRITE_STDOUT,
            "1>": RedirectMode.OVERWRITE_STDOUT,
            ">>": RedirectMode.APPEND_STDOUT,
            "1>>": RedirectMode.APPEND_STDOUT,
            "2>": RedirectMode.OVERWRITE_STDERR,
            "2>>": RedirectMode.APPEND_STDERR,
        }
        for operator, mode in cases.items():
            pipeline = self.parser.parse(["cmd", "x", operator, "file"])
            self.assertEqual(pipeline.redirection, Redirection(mode, "file"), operator)
            self.assertEqual(pipeline.stages[0].arguments, ("x",))

    def test_mode_helpers(self):
        self.assertEqual(RedirectMode.APPEND_STDERR.stream, "stderr")
        self.assertTrue(RedirectMode.APPEND_STDERR.append)
        self.assertEqual(RedirectMode.OVERWRITE_STDOUT.stream, "stdout")
        self.assertFalse(RedirectMode.OVERWRITE_STDOUT.append)

    def test_redirection_of_earlier_stage_discarded(self):
        """Only the last stage may carry a redirection."""
        pipeline = self.parser.parse_line("cmd1 a > first.txt b | cmd2 c")
        self.assertEqual(pipeline.stages[0], Stage("cmd1", ("a",)))
        self.assertEqual(pipeline.stages[1], Stage("cmd2", ("c",)))
        self.assertIsNone(pipeline.redirection)

    def test_words_after_target_ignored(self):
        pipeline = self.parser.parse_line("echo a > out b c")
        self.assertEqual(pipeline.stages[0].arguments, ("a",))
        self.assertEqual(pipeline.redirection.target, "out")

    def test_first_operator_wins(self):
        pipeline = self.parser.parse_line("echo a 2> err > out")
        self.assertEqual(pipeline.redirection, Redirection(RedirectMode.OVERWRITE_STDERR, "err"))

    def test_operator_without_target_dropped(self):
        """A dangling operator yields no redirection."""
        pipeline = self.parser.parse_line("echo a >")
        self.assertEqual(pipeline.stages[0].arguments, ("a",))
        self.assertIsNone(pipeline.redirection)

    def test_empty_groups_dropped(self):
        """Leading, trailing and doubled pipes are absorbed."""
        pipeline = self.parser.parse_line("| a || b |")
        self.assertEqual([s.command for s in pipeline.stages], ["a", "b"])

    def test_nothing_to_run(self):
        self.assertIsNone(self.parser.parse_line(""))
        self.assertIsNone(self.parser.parse_line("   "))
        self.assertIsNone(self.parser.parse_line("| |"))

    def test_quoted_operators_are_arguments(self):
        """Quoted operator text is never an operator."""
        pipeline = self.parser.parse_line("echo '|' '>' out")
        self.assertEqual(pipeline.stages, (Stage("echo", ("|", ">", "out")),))
        self.assertIsNone(pipeline.redirection)

    def test_plain_strings(self):
        """Plain strings are treated as unquoted words."""
        pipeline = self.parser.parse(["a", "|", "b", ">>", "log"])
        self.assertEqual(len(pipeline.stages), 2)
        self.assertEqual(pipeline.redirection, Redirection(RedirectMode.APPEND_STDOUT, "log"))

    def test_stage_argv(self):
        self.assertEqual(Stage("grep", ("-n", "x")).argv, ["grep", "-n", "x"])

    def test_pipeline_needs_a_stage(self):
        with self.assertRaises(ValueError):
            Pipeline(stages=())


class TestStrictParsing(unittest.TestCase):
    """Test the strict parser options."""

    def test_strict_pipelines(self):
        parser = PipelineParser(strict_pipelines=True)
        for line in ("| a", "a |", "a || b", "|"):
            with self.assertRaises(PipelineSyntaxError, msg=line):
                parser.parse_line(line)
        self.assertEqual(len(parser.parse_line("a | b").stages), 2)

    def test_strict_redirections(self):
        parser = PipelineParser(strict_redirections=True)
        with self.assertRaises(RedirectionSyntaxError) as ctx:
            parser.parse_line("echo a 2>>")
        self.assertEqual(ctx.exception.operator, "2>>")
        self.assertIsInstance(ctx.exception, ShellSyntaxError)

    def test_strict_errors_are_syntax_errors(self):
        parser = PipelineParser(strict_pipelines=True)
        with self.assertRaises(SyntaxError):
            parser.parse_line("a |")


if __name__ == '__main__':
    unittest.main(verbosity=2)
