"""
Live Structural Validation

DESIGN DECISION: There are two bracket checks in the calculator, on purpose.

LIVE CHECK (this module):
- Runs after every keystroke
- Only fails when a ")" closes nothing
- Unclosed "(" are fine, the user may still be typing
- Never blocks input, never touches the buffer

EVALUATION CHECK (engine.sanitizer):
- Runs once, when "=" is pressed
- Requires exact balance
- Its failure becomes the error sentinel

Keeping them separate means typing feedback stays cheap and permissive
while the evaluation check stays exhaustive.
"""


class StructuralValidator:
    """
    Bracket-order check used for typing feedback.

    The validator is stateless; one instance can serve any number of
    sessions.
    """

    def validate(self, expression: str) -> bool:
        """
        Return False if a closing parenthesis appears with no open one
        before it. An empty expression is valid.
        """
        depth = 0
        for char in expression:
            if char == "(":
                depth += 1
            elif char == ")":
                depth -= 1
                if depth < 0:
                    return False
        return True

    def open_depth(self, expression: str) -> int:
        """Number of "(" still waiting for a ")" (0 if the order is broken)."""
        if not self.validate(expression):
            return 0
        return expression.count("(") - expression.count(")")


def is_structurally_valid(expression: str) -> bool:
    """Module-level shortcut for StructuralValidator().validate."""
    return StructuralValidator().validate(expression)
