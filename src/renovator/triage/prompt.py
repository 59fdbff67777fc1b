"""Interactive approval prompt.

State machine::

    ASK_YES_NO --y--> approve(default comment)
               --c--> ASK_COMMENT --> ASK_CONFIRM_WITH_COMMENT --y--> approve(comment)
               --?--> SHOW_HELP --> ASK_YES_NO
               --anything else / read failure--> skip

Help loops back to the first question as often as the user asks for it.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto
from typing import TextIO

log = logging.getLogger(__name__)

DEFAULT_COMMENT = "LGTM"

HELP_LEGEND = (
    "y - Approve and merge this PR",
    "n - Skip this PR",
    "c - Approve and merge this PR with custom comment",
    "? - Show this help",
)


@dataclass(frozen=True)
class ApprovalDecision:
    approve: bool
    comment: str | None = None

    @classmethod
    def approved(cls, comment: str) -> ApprovalDecision:
        """Approve and merge with this review comment."""
        return cls(approve=True, comment=comment)

    @classmethod
    def skipped(cls) -> ApprovalDecision:
        """Leave the PR alone this round."""
        return cls(approve=False)


class PromptState(Enum):
    ASK_YES_NO = auto()
    ASK_COMMENT = auto()
    ASK_CONFIRM_WITH_COMMENT = auto()
    SHOW_HELP = auto()


class ConfirmationPrompt:
    """Turns a y/n/c/? conversation into an ApprovalDecision.

    input_fn is called with the prompt text and returns the typed line (builtin
    input by default); it may raise EOFError or OSError, which count as "skip".
    With assume_yes every PR is approved with the default comment without reading input.
    """

    def __init__(
        self,
        default_comment: str = DEFAULT_COMMENT,
        *,
        assume_yes: bool = False,
        input_fn: Callable[[str], str] | None = None,
        stream: TextIO | None = None,
    ) -> None:
        self.default_comment = default_comment
        self.assume_yes = assume_yes
        self._input = input_fn if input_fn is not None else input
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def _read(self, text: str) -> str | None:
        try:
            return self._input(text).strip()
        except (EOFError, OSError) as e:
            # input() writes nothing after the prompt on EOF
            print(file=self.stream)
            log.error("Error reading input: %s", e)
            return None

    def show_help(self) -> None:
        for line in HELP_LEGEND:
            print(line, file=self.stream)

    def ask(self, title: str) -> ApprovalDecision:
        if self.assume_yes:
            print(f"Auto-approving PR '{title}'", file=self.stream)
            return ApprovalDecision.approved(self.default_comment)

        state = PromptState.ASK_YES_NO
        comment = self.default_comment
        while True:
            if state is PromptState.ASK_YES_NO:
                answer = self._read(f"Approve and merge PR '{title}'? [y/N]: ")
                if answer in ("y", "Y"):
                    return ApprovalDecision.approved(self.default_comment)
                if answer in ("c", "C"):
                    state = PromptState.ASK_COMMENT
                elif answer == "?":
                    state = PromptState.SHOW_HELP
                else:
                    return ApprovalDecision.skipped()

            elif state is PromptState.SHOW_HELP:
                self.show_help()
                state = PromptState.ASK_YES_NO

            elif state is PromptState.ASK_COMMENT:
                typed = self._read("Enter comment to approve the PR with: ")
                comment = typed or self.default_comment
                state = PromptState.ASK_CONFIRM_WITH_COMMENT

            elif state is PromptState.ASK_CONFIRM_WITH_COMMENT:
                answer = self._read(
                    f"Approve and merge PR '{title}' with comment '{comment}'? [y/N]: "
                )
                if answer in ("y", "Y"):
                    return ApprovalDecision.approved(comment)
                return ApprovalDecision.skipped()
