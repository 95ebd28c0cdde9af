"""
Expression buffer with keystroke edit rules.

The buffer holds exactly what the user sees on the input line, using
display glyphs (× and ÷). Edit rules keep it free of the obvious
mistakes while typing:

- an operator typed after an operator replaces it, except "-" after
  "×" or "÷", which starts a negative operand; an operator after such a
  "×-" pair replaces the whole pair
- a second "." in the same number is ignored
- "0" after a lone "0" is ignored, and a nonzero digit replaces it

Evaluation-time checks (balance, leftover operator runs) belong to the
sanitizer, not here.
"""

from calculator.models.calculator import OPERATOR_GLYPHS, KeypadToken

# Characters that end a numeric run
_RUN_BREAKERS = OPERATOR_GLYPHS | {"(", ")"}

_NEGATABLE_AFTER = frozenset({"×", "÷"})


class ExpressionBuffer:
    """
    Mutable expression text owned by one calculator session.

    Only edit tokens (digits, ".", parentheses, operators) are accepted
    by `append`; clear/backspace have their own methods and evaluate is
    handled by the session.
    """

    def __init__(self, text: str = ""):
        self._text = text

    @property
    def text(self) -> str:
        return self._text

    def __str__(self) -> str:
        return self._text

    def __len__(self) -> int:
        return len(self._text)

    def __bool__(self) -> bool:
        return bool(self._text)

    def trailing_number(self) -> str:
        """Characters typed since the last operator or parenthesis."""
        for index in range(len(self._text) - 1, -1, -1):
            if self._text[index] in _RUN_BREAKERS:
                return self._text[index + 1:]
        return self._text

    def _ends_with_negative_sign(self) -> bool:
        return (
            len(self._text) >= 2
            and self._text[-1] == "-"
            and self._text[-2] in _NEGATABLE_AFTER
        )

    def append(self, token: KeypadToken) -> bool:
        """
        Apply one edit token.

        Returns True if the buffer text changed.

        Raises:
            ValueError: If token is clear, backspace or evaluate
        """
        if token.is_command:
            raise ValueError(f"{token.name} is not an edit token")

        value = token.value
        before = self._text

        if token.is_operator and self._text and self._text[-1] in OPERATOR_GLYPHS:
            last = self._text[-1]
            if value == "-" and last in _NEGATABLE_AFTER:
                self._text += value
            elif self._ends_with_negative_sign():
                # "×-" followed by another operator: the whole pair is replaced,
                # a second "-" changes nothing
                if value != "-":
                    self._text = self._text[:-2] + value
            else:
                self._text = self._text[:-1] + value
            return self._text != before

        run = self.trailing_number()

        if token == KeypadToken.DECIMAL_POINT and "." in run:
            return False

        if run == "0":
            if token == KeypadToken.ZERO:
                return False
            if token.is_digit:
                self._text = self._text[:-1] + value
                return True

        self._text += value
        return True

    def backspace(self) -> bool:
        """Remove the last character. Returns True if anything was removed."""
        if not self._text:
            return False
        self._text = self._text[:-1]
        return True

    def clear(self) -> None:
        self._text = ""
