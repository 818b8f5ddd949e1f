from __future__ import annotations

from typing import Callable, Optional

from .errors import WizardInputExhausted

Ask = Callable[[str, bool], bool]

INVALID_INPUT = "Invalid input, please answer y or n."


def ask(
    question: str,
    default: bool,
    *,
    input_fn: Callable[[str], str] = input,
    output: Callable[[str], None] = print,
    max_attempts: Optional[int] = None,
) -> bool:
    """Ask a yes/no question until the answer is y, n or empty (= default).

    Unbounded unless max_attempts is given. A closed stdin ends the wizard.
    """

    hint = "[Y/n]" if default else "[y/N]"
    attempts = 0
    while True:
        try:
            answer = input_fn(f"{question} {hint} ")
        except EOFError as e:
            raise WizardInputExhausted(f"No answer for: {question}") from e

        answer = answer.strip().lower()
        if not answer:
            return default
        if answer == "y":
            return True
        if answer == "n":
            return False

        output(INVALID_INPUT)
        attempts += 1
        if max_attempts is not None and attempts >= max_attempts:
            raise WizardInputExhausted(f"Too many invalid answers for: {question}")
