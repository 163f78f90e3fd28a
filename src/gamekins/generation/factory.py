"""
Challenge Factory.

Retry and fallback controller around the generation pipeline:

1. rank-select a candidate file and draw a challenge kind
2. run the kind's generator on the file
3. discard duplicates, rejected or stored challenges and broken results

Every loop is bounded by an attempt count. When the attempts run out, or
there is nothing to select from, the factory hands out a DummyChallenge
that says why.
"""

import logging
import random
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from gamekins.challenges.base import Challenge, current_millis
from gamekins.challenges.build import BuildChallenge
from gamekins.challenges.coverage import (
    BranchCoverageChallenge,
    ClassCoverageChallenge,
    ExceptionCoverageChallenge,
    LineCoverageChallenge,
    MethodCoverageChallenge,
)
from gamekins.challenges.dummy import DummyChallenge
from gamekins.challenges.mutation import MutationChallenge
from gamekins.challenges.smell import SmellChallenge
from gamekins.config.models import GamekinsConfig, GenerationConfig
from gamekins.generation.registry import (
    ChallengeTypeRegistry,
    RegistryConfigurationError,
    create_default_registry,
)
from gamekins.generation.selection import rank_select
from gamekins.models.base import BuildResult, ChallengeKind, DummyReason
from gamekins.models.files import BuildParameters, FileDetails, SourceFileDetails
from gamekins.models.generation import ChallengeGenerationData, MutationRunner, generation_logger
from gamekins.reports.base import ReportError
from gamekins.reports.jacoco import (
    load_method_entries,
    load_source_report,
    not_fully_covered_methods,
)
from gamekins.reports.mutation import alive_mutants, load_mutations, mutants_of_file
from gamekins.reports.smells import load_smells, smells_of_file
from gamekins.state.repository import ChallengeRepository

MILLIS_PER_DAY = 24 * 60 * 60 * 1000


@dataclass(frozen=True)
class AttemptOutcome:
    """Result of one generation attempt.

    Attributes:
        challenge: The generated challenge, None if the attempt failed
        reason: Why the attempt failed, empty on success
    """

    challenge: Optional[Challenge] = None
    reason: str = ""

    @property
    def succeeded(self) -> bool:
        return self.challenge is not None


class ChallengeFactory:
    """Generates challenges for users.

    Usage:
        factory = ChallengeFactory.from_config(config)
        added = factory.generate_new_challenges("alice", parameters, files, repository)
    """

    def __init__(
        self,
        registry: ChallengeTypeRegistry | None = None,
        config: GenerationConfig | None = None,
        rng: random.Random | None = None,
        listener: logging.Logger | None = None,
        mutation_runner: MutationRunner | None = None,
        clock: Callable[[], int] = current_millis,
    ) -> None:
        """Initialize the factory.

        Args:
            registry: Drawable challenge kinds, defaults to the built-in ones
            config: Generation limits
            rng: Random source shared by all draws
            listener: Diagnostic sink of the rounds
            mutation_runner: Hook that runs the mutation tool before a
                mutation challenge is drawn
            clock: Current time in epoch milliseconds
        """
        self.config = config or GenerationConfig()
        self.registry = registry or create_default_registry()
        self.rng = rng or random.Random(self.config.seed)
        self.listener = listener or generation_logger
        self.mutation_runner = mutation_runner
        self.clock = clock

    @classmethod
    def from_config(
        cls,
        config: GamekinsConfig,
        listener: logging.Logger | None = None,
        mutation_runner: MutationRunner | None = None,
    ) -> "ChallengeFactory":
        """Create a factory from the root configuration."""
        return cls(
            registry=create_default_registry(config.weights),
            config=config.generation,
            listener=listener,
            mutation_runner=mutation_runner,
        )

    # ------------------------------------------------------------------
    # Single challenge
    # ------------------------------------------------------------------

    def generate_challenge(
        self,
        user: str,
        parameters: BuildParameters,
        files: Sequence[FileDetails],
        repository: ChallengeRepository,
    ) -> Challenge:
        """Generate one challenge from the given files.

        Each attempt removes the selected file from the working pool, so a
        file that yields nothing is not tried again in the same call.

        Args:
            user: Acting user
            parameters: Build of the round
            files: Candidate files
            repository: Source of the user's rejected and stored challenges

        Returns:
            A challenge, or a DummyChallenge if none could be built
        """
        project = parameters.project_name
        work_list = list(files)
        rejected = [entry.challenge for entry in repository.rejected(user, project)]
        stored = list(repository.stored(user, project))

        for attempt in range(1, self.config.max_attempts + 1):
            if not work_list:
                break
            try:
                outcome = self._attempt(user, parameters, work_list, rejected, stored)
            except RegistryConfigurationError as e:
                self.listener.warning(str(e))
                return DummyChallenge(DummyReason.NO_CHALLENGE_TYPES, parameters.branch)

            if outcome.succeeded:
                return outcome.challenge
            self.listener.debug(f"Attempt {attempt} failed: {outcome.reason}")

        self.listener.info("No Challenge could be built")
        return DummyChallenge(DummyReason.GENERATION, parameters.branch)

    def _attempt(
        self,
        user: str,
        parameters: BuildParameters,
        work_list: list[FileDetails],
        rejected: list[Challenge],
        stored: list[Challenge],
    ) -> AttemptOutcome:
        kind = self.registry.choose(self.rng)
        candidates = self._candidates(kind, work_list, parameters)
        if not candidates:
            return AttemptOutcome(reason=f"no candidate file for {kind.value}")

        selected = rank_select(candidates, self.rng, self.config.rank_bias)
        work_list.remove(selected)

        if self._class_blocked(selected, rejected):
            return AttemptOutcome(
                reason=f"class {selected.file_name} in package {selected.package_name} "
                "was rejected previously"
            )
        if self._class_blocked(selected, stored):
            return AttemptOutcome(
                reason=f"class {selected.file_name} in package {selected.package_name} "
                "is currently stored"
            )

        self.listener.debug(f"Try class {selected.file_name} and type {kind.value}")
        data = ChallengeGenerationData(
            parameters=parameters,
            user=user,
            selected_file=selected,
            listener=self.listener,
            rng=self.rng,
            mutation_runner=self.mutation_runner,
        )
        try:
            challenge = self.registry.get_generator(kind)(data)
        except (ReportError, OSError) as e:
            self.listener.warning(f"Could not read reports of {selected.file_name}: {e}")
            return AttemptOutcome(reason=str(e))

        if challenge is None:
            return AttemptOutcome(reason=f"{selected.file_name} offers no {kind.value} challenge")
        if challenge in rejected:
            return AttemptOutcome(reason=f"challenge {challenge} was already rejected previously")
        if challenge in stored:
            return AttemptOutcome(reason=f"challenge {challenge} is already stored")
        if not challenge.built_correctly:
            return AttemptOutcome(reason=f"challenge {challenge} was not built correctly")
        return AttemptOutcome(challenge=challenge)

    @staticmethod
    def _candidates(
        kind: ChallengeKind, work_list: list[FileDetails], parameters: BuildParameters
    ) -> list[FileDetails]:
        """Files of the pool that a kind can target.

        Fully covered and vanished files are never offered. Coverage kinds
        also need the file's JaCoCo pages.
        """
        pool = [details for details in work_list if details.coverage < 1.0 and details.exists]
        if kind.is_coverage:
            return [
                details
                for details in pool
                if isinstance(details, SourceFileDetails) and details.reports_exist(parameters)
            ]
        if kind == ChallengeKind.MUTATION:
            return [details for details in pool if isinstance(details, SourceFileDetails)]
        return pool

    @staticmethod
    def _class_blocked(selected: FileDetails, challenges: list[Challenge]) -> bool:
        """Whether a class challenge for the file is among the given ones."""
        return any(
            isinstance(challenge, ClassCoverageChallenge) and challenge.details.same_file(selected)
            for challenge in challenges
        )

    # ------------------------------------------------------------------
    # Quota loop
    # ------------------------------------------------------------------

    def generate_unique_challenge(
        self,
        user: str,
        parameters: BuildParameters,
        files: Sequence[FileDetails],
        repository: ChallengeRepository,
    ) -> int:
        """Generate a challenge whose text differs from all current ones.

        Returns:
            1 if a challenge was added to the current set, 0 otherwise
        """
        project = parameters.project_name
        for _ in range(self.config.unique_attempts):
            self.listener.debug("Started to generate challenge")
            challenge = self.generate_challenge(user, parameters, files, repository)
            self.listener.debug(f"Generated challenge {challenge}")

            if repository.add_if_unique(user, project, challenge):
                self.listener.info(f"Added challenge {challenge}")
                return 1
            self.listener.info("Challenge is not unique")

        self.listener.info(f"No unique challenge found for user {user}")
        return 0

    def generate_new_challenges(
        self,
        user: str,
        parameters: BuildParameters,
        files: Sequence[FileDetails],
        repository: ChallengeRepository,
    ) -> int:
        """Fill the user's current set up to the configured quota.

        Only files the user changed are candidates. Without any, a single
        DummyChallenge is added and the round ends.

        Args:
            user: Acting user
            parameters: Build of the round
            files: Files changed in recent history, by any user
            repository: Per-user challenge state

        Returns:
            Number of challenges added. Dummies from exhausted generation
            rounds count, the NOTHING_DEVELOPED and NO_CHALLENGE_TYPES
            dummies do not
        """
        project = parameters.project_name
        held = len(repository.current(user, project))
        limit = self.config.current_challenges
        if held >= limit:
            return 0

        self.listener.info(f"Start generating challenges for user {user}")
        user_files = [details for details in files if details.changed_by(user)]
        self.listener.info(f"Found {len(user_files)} last changed files of user {user}")

        if self.registry.total_weight == 0:
            self.listener.warning("No challenge kind has a positive weight")
            repository.new_challenge(
                user, project, DummyChallenge(DummyReason.NO_CHALLENGE_TYPES, parameters.branch)
            )
            return 0

        generated = 0
        for _ in range(held, limit):
            if not user_files:
                repository.new_challenge(
                    user, project, DummyChallenge(DummyReason.NOTHING_DEVELOPED, parameters.branch)
                )
                break
            generated += self.generate_unique_challenge(user, parameters, user_files, repository)
        return generated

    # ------------------------------------------------------------------
    # Host-issued challenges
    # ------------------------------------------------------------------

    def generate_build_challenge(
        self,
        user: str,
        parameters: BuildParameters,
        repository: ChallengeRepository,
        committer: str,
    ) -> bool:
        """Issue a BuildChallenge after a failed build of the user's commit.

        At most one build challenge is solved per configured interval.

        Args:
            user: User to receive the challenge
            parameters: Build whose result triggered the call
            repository: Per-user challenge state
            committer: Author of the head commit, as mapped by the host

        Returns:
            True if a challenge was added
        """
        result = parameters.build_result
        if result is None or result == BuildResult.SUCCESS:
            return False
        if committer != user:
            return False

        project = parameters.project_name
        last_builds = [
            challenge
            for challenge in repository.completed(user, project)
            if isinstance(challenge, BuildChallenge)
        ]
        interval = self.config.build_challenge_interval_days * MILLIS_PER_DAY
        if last_builds and self.clock() - last_builds[-1].solved <= interval:
            return False

        challenge = BuildChallenge(parameters.branch, result)
        if challenge in repository.current(user, project):
            return False

        repository.new_challenge(user, project, challenge)
        self.listener.info("Generated new BuildChallenge")
        return True

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def generate_all_possible_challenges_for_class(
        self,
        selected: SourceFileDetails,
        parameters: BuildParameters,
        user: str,
    ) -> list[Challenge]:
        """Build every challenge the reports currently allow for one class.

        Args:
            selected: Source file to inspect
            parameters: Build whose reports are read
            user: User the challenges would be for

        Returns:
            Class, line, branch, exception, method, mutation and smell
            challenges, in that order
        """
        data = ChallengeGenerationData(
            parameters=parameters,
            user=user,
            selected_file=selected,
            listener=self.listener,
            rng=self.rng,
        )
        policy = parameters.read_policy
        report = load_source_report(selected.source_report(parameters), policy)

        challenges: list[Challenge] = []
        if not report.is_empty:
            challenges.append(ClassCoverageChallenge(data, report))
            for line in report.uncovered_lines():
                challenges.append(LineCoverageChallenge(data.with_line(line), report))
            for line in report.uncovered_lines(partially=True):
                challenges.append(BranchCoverageChallenge(data.with_line(line), report))
            for line in report.exception_lines():
                challenges.append(ExceptionCoverageChallenge(data.with_line(line), report))
            methods = load_method_entries(selected.method_report(parameters), report, policy)
            for method in not_fully_covered_methods(methods):
                challenges.append(MethodCoverageChallenge(data.with_method(method), report))

        mutants = mutants_of_file(load_mutations(parameters.mutation_report_file, policy), selected)
        for mutant in alive_mutants(mutants):
            challenges.append(MutationChallenge.from_data(data.with_mutant(mutant)))

        for smell in smells_of_file(load_smells(parameters.smells_report_file, policy), selected):
            challenges.append(SmellChallenge(selected, smell, parameters.branch))

        return challenges
