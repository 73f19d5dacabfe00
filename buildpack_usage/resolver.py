"""Turn a buildpack name, or an interactive choice, into a Buildpack."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TextIO

from buildpack_usage.client import CloudControllerClient
from buildpack_usage.errors import (
    BuildpackNotFoundError,
    InvalidSelectionError,
    TooManyAttemptsError,
)
from buildpack_usage.models import Buildpack, BuildpackPage, decode
from buildpack_usage.settings import MAX_SELECTION_ATTEMPTS

logger = logging.getLogger(__name__)

BUILDPACKS_PATH = "/v2/buildpacks"


class SelectionState(Enum):
    PROMPTING = "prompting"
    SELECTED = "selected"
    FAILED = "failed"


def _parse_choice(answer: str) -> int | None:
    try:
        return int(answer.strip())
    except ValueError:
        return None


@dataclass
class SelectionPrompt:
    """
    Bounded state machine behind the "Please choose" loop.

    Every answer costs one attempt. A number in ``[1, count]`` moves the prompt
    to SELECTED; running out of attempts moves it to FAILED.
    """

    count: int
    max_attempts: int = MAX_SELECTION_ATTEMPTS
    state: SelectionState = SelectionState.PROMPTING
    attempts: int = 0
    choice: int | None = None

    def submit(self, answer: str) -> SelectionState:
        if self.state is not SelectionState.PROMPTING:
            raise RuntimeError(f"Selection already finished ({self.state.value}).")

        self.attempts += 1
        choice = _parse_choice(answer)
        if choice is not None and 1 <= choice <= self.count:
            self.choice = choice
            self.state = SelectionState.SELECTED
        elif self.attempts >= self.max_attempts:
            self.state = SelectionState.FAILED
        return self.state


class BuildpackResolver:
    """Looks buildpacks up in the platform's buildpack collection."""

    def __init__(
        self,
        client: CloudControllerClient,
        *,
        max_attempts: int = MAX_SELECTION_ATTEMPTS,
    ) -> None:
        if max_attempts <= 0:
            raise ValueError("max_attempts must be greater than zero.")
        self._client = client
        self._max_attempts = max_attempts

    def list_buildpacks(self) -> list[Buildpack]:
        """Return every buildpack in fetch order."""
        buildpacks: list[Buildpack] = []
        next_url: str | None = BUILDPACKS_PATH
        while next_url is not None:
            page = decode(BuildpackPage, self._client.fetch(next_url), next_url)
            buildpacks.extend(resource.to_buildpack() for resource in page.resources)
            next_url = page.next_url
        logger.debug("Fetched buildpacks", extra={"count": len(buildpacks)})
        return buildpacks

    def resolve_by_name(self, name: str) -> Buildpack:
        """Return the first buildpack whose name equals ``name`` exactly."""
        for buildpack in self.list_buildpacks():
            if buildpack.name == name:
                logger.info(
                    "Resolved buildpack by name",
                    extra={"buildpack": name, "guid": buildpack.guid},
                )
                return buildpack
        raise BuildpackNotFoundError(name)

    def select_interactively(self, input_stream: TextIO, output: TextIO) -> Buildpack:
        """List the buildpacks on ``output`` and read a 1-based choice from ``input_stream``."""
        buildpacks = self.list_buildpacks()
        if not buildpacks:
            raise InvalidSelectionError("No buildpacks are available to choose from.")

        output.write("Please select which buildpack whose apps you would like to see:\n")
        for index, buildpack in enumerate(buildpacks, start=1):
            output.write(f"{index}. {buildpack.name}\n")

        prompt = SelectionPrompt(count=len(buildpacks), max_attempts=self._max_attempts)
        while prompt.state is SelectionState.PROMPTING:
            output.write("Please choose: ")
            output.flush()
            # readline() returns "" at end of input, which counts as a bad answer
            answer = input_stream.readline()
            output.write("\n")
            prompt.submit(answer)

        if prompt.state is SelectionState.FAILED or prompt.choice is None:
            logger.warning("Interactive selection failed", extra={"attempts": prompt.attempts})
            raise TooManyAttemptsError(prompt.attempts)

        selected = buildpacks[prompt.choice - 1]
        logger.info(
            "Buildpack selected interactively",
            extra={"buildpack": selected.name, "guid": selected.guid},
        )
        return selected
