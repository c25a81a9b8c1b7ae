"""Result types passed between pipeline stages."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class VersionWindow(BaseModel):
    """The two version markers bounding the upstream search window."""

    model_config = ConfigDict(frozen=True)

    old: str
    new: str

    @property
    def is_empty(self) -> bool:
        """True when the marker did not change."""
        return self.old == self.new

    def __str__(self) -> str:
        return f"{self.old}..{self.new}"


class ExtractionResult(BaseModel):
    """Pull request identifiers found in the upstream log."""

    pull_requests: list[int] = Field(default_factory=list)
    skipped: int = Field(
        default=0,
        description="Log entries without a parseable trailing reference",
    )


class BranchMatch(BaseModel):
    """A pull request paired with its downstream testing branch."""

    model_config = ConfigDict(frozen=True)

    pull_request: int
    branch: str


class MergeOutcome(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class MergeAttempt(BaseModel):
    """Outcome of merging one branch into the integration branch."""

    model_config = ConfigDict(frozen=True)

    branch: str
    pull_request: int
    outcome: MergeOutcome
    compare_link: str
    detail: str = ""

    @property
    def succeeded(self) -> bool:
        return self.outcome is MergeOutcome.SUCCESS


class Report(BaseModel):
    """Successes and failures accumulated over one pipeline run."""

    successes: list[MergeAttempt] = Field(default_factory=list)
    failures: list[MergeAttempt] = Field(default_factory=list)

    def record(self, attempt: MergeAttempt) -> None:
        """Append an attempt to the matching section."""
        if attempt.succeeded:
            self.successes.append(attempt)
        else:
            self.failures.append(attempt)

    @property
    def is_empty(self) -> bool:
        return not self.successes and not self.failures

    @property
    def attempts(self) -> list[MergeAttempt]:
        return [*self.successes, *self.failures]
