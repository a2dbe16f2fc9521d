"""
Word Splitter

Turns one raw input line into shell words with quoting resolved.

Author: YSNRFD
Version: 1.0.0
"""

from typing import List

from pipeshell.exceptions import UnterminatedQuoteError


PIPE = '|'

# Characters a backslash may escape inside double quotes
DOUBLE_QUOTE_ESCAPES = ('"', '\\')

# A bare file descriptor number that joins a following '>' operator
REDIRECT_FDS = ('1', '2')


class Word(str):
    """
    A shell word.

    Behaves exactly like ``str``. ``quoted`` is True when any part of
    the word came from quotes or a backslash escape; such a word is
    never interpreted as an operator.
    """

    def __new__(cls, value: str, quoted: bool = False) -> 'Word':
        word = super().__new__(cls, value)
        word.quoted = quoted
        return word

    def __repr__(self) -> str:
        if self.quoted:
            return f"Word({str.__repr__(self)}, quoted=True)"
        return f"Word({str.__repr__(self)})"


class WordSplitter:
    """
    Splits a command line into words.

    Rules:
    - Unquoted whitespace separates words
    - '...' is literal, no escapes inside
    - "..." lets a backslash escape only '"' and '\\'
    - An unquoted backslash escapes the next character
    - Adjacent quoted and unquoted parts form a single word
    - Unquoted '|', '>' and '>>' are always standalone tokens; a bare
      '1' or '2' right before '>' becomes part of the operator

    Example:
        >>> WordSplitter().split('echo "a b" \\'c|d\\' 1>out.txt')
        ['echo', 'a b', 'c|d', '1>', 'out.txt']
    """

    def split(self, line: str) -> List[Word]:
        """
        Split a line into words.

        Args:
            line: Raw input line

        Returns:
            List of words, operators included

        Raises:
            UnterminatedQuoteError: If a quote is never closed
        """
        words: List[Word] = []
        current: List[str] = []
        quoted = False
        in_word = False
        i = 0
        length = len(line)

        def flush() -> None:
            nonlocal current, quoted, in_word
            if in_word:
                words.append(Word(''.join(current), quoted=quoted))
            current = []
            quoted = False
            in_word = False

        while i < length:
            char = line[i]

            if char == "'":
                end = line.find("'", i + 1)
                if end == -1:
                    raise UnterminatedQuoteError("'", i)
                current.append(line[i + 1:end])
                quoted = in_word = True
                i = end + 1
                continue

            if char == '"':
                i = self._read_double_quoted(line, i, current)
                quoted = in_word = True
                continue

            if char == '\\':
                if i + 1 < length:
                    current.append(line[i + 1])
                    quoted = True
                    i += 2
                else:
                    current.append(char)
                    i += 1
                in_word = True
                continue

            if char.isspace():
                flush()
                i += 1
                continue

            if char == PIPE:
                flush()
                words.append(Word(PIPE))
                i += 1
                continue

            if char == '>':
                operator = '>'
                if not quoted and ''.join(current) in REDIRECT_FDS:
                    operator = current[0] + operator
                    current = []
                    in_word = False
                flush()
                if i + 1 < length and line[i + 1] == '>':
                    operator += '>'
                    i += 1
                words.append(Word(operator))
                i += 1
                continue

            current.append(char)
            in_word = True
            i += 1

        flush()
        return words

    @staticmethod
    def _read_double_quoted(line: str, start: int, current: List[str]) -> int:
        """Consume a double-quoted section; return the index after it."""
        i = start + 1
        length = len(line)

        while i < length:
            char = line[i]
            if char == '"':
                return i + 1
            if char == '\\' and i + 1 < length and line[i + 1] in DOUBLE_QUOTE_ESCAPES:
                current.append(line[i + 1])
                i += 2
                continue
            current.append(char)
            i += 1

        raise UnterminatedQuoteError('"', start)


def split_words(line: str) -> List[Word]:
    """Split ``line`` with a default WordSplitter."""
    return WordSplitter().split(line)
