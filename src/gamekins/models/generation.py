"""
Per-attempt context bundle handed to the challenge generators.
"""

import logging
import random
from dataclasses import dataclass, field, replace
from typing import Callable, Optional

from gamekins.models.coverage import LineCoverage, MethodCoverage, MutationRecord
from gamekins.models.files import BuildParameters, FileDetails, SourceFileDetails

# Runs the mutation tool for one class and reports whether it succeeded
MutationRunner = Callable[[SourceFileDetails, BuildParameters], bool]

generation_logger = logging.getLogger("gamekins.generation")


@dataclass(frozen=True)
class ChallengeGenerationData:
    """Everything a generator needs for one attempt.

    Built fresh for every candidate file. Generators fill in the one field
    they pick (line, method or mutant) with ``with_line`` and friends,
    which return a new bundle.

    Attributes:
        parameters: Build parameters of the round
        user: Acting user
        selected_file: File drawn by the candidate selector
        listener: Diagnostic sink for the round
        rng: Random source shared by the round
        line: Pre-picked line for line, branch and exception challenges
        method: Pre-picked method for method challenges
        mutant: Pre-picked mutant for mutation challenges
        mutation_runner: Hook that executes the mutation tool, if any
    """

    parameters: BuildParameters
    user: str
    selected_file: FileDetails
    listener: logging.Logger = field(default=generation_logger)
    rng: random.Random = field(default_factory=random.Random)
    line: Optional[LineCoverage] = None
    method: Optional[MethodCoverage] = None
    mutant: Optional[MutationRecord] = None
    mutation_runner: Optional[MutationRunner] = None

    def with_line(self, line: LineCoverage) -> "ChallengeGenerationData":
        return replace(self, line=line)

    def with_method(self, method: MethodCoverage) -> "ChallengeGenerationData":
        return replace(self, method=method)

    def with_mutant(self, mutant: MutationRecord) -> "ChallengeGenerationData":
        return replace(self, mutant=mutant)
