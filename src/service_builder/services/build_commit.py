"""Build-commit use case — classify a commit, then build what it touched.

This is the single entry point for the business logic.  It depends only on
the classifier, the orchestrator and, optionally, the workspace whose
checkout must match the commit; the interface layer injects concrete
adapters at runtime.
"""

from __future__ import annotations

import logging

from service_builder.domain.entities import RunReport
from service_builder.domain.exceptions import WorkspaceMismatchError
from service_builder.domain.ports.workspace import Workspace
from service_builder.services.build_orchestrator import BuildOrchestrator
from service_builder.services.change_classifier import ChangeClassifier

logger = logging.getLogger(__name__)


class BuildCommitUseCase:
    """Orchestrates the commit → classification → builds pipeline."""

    def __init__(
        self,
        classifier: ChangeClassifier,
        orchestrator: BuildOrchestrator,
        workspace: Workspace | None = None,
    ) -> None:
        self._classifier = classifier
        self._orchestrator = orchestrator
        self._workspace = workspace

    async def execute(self, commit_sha: str) -> RunReport:
        """Run the full pipeline for *commit_sha*.

        A :class:`WorkspaceMismatchError` or :class:`DiffFetchError`
        propagates before anything is built.
        """
        if self._workspace is not None:
            self._check_workspace(self._workspace, commit_sha)

        logger.info("Classifying commit %s", commit_sha)
        classification = await self._classifier.classify(commit_sha)

        if not classification:
            logger.info("No service directories affected by %s", commit_sha)
            return RunReport()

        for directory, status in sorted(classification.items()):
            logger.info("  %-10s %s", status.value, directory)

        return await self._orchestrator.run(classification)

    @staticmethod
    def _check_workspace(workspace: Workspace, commit_sha: str) -> None:
        # the tree is read to resolve owners, so it must hold this commit
        head = workspace.head_sha()
        if not head.lower().startswith(commit_sha.lower()):
            raise WorkspaceMismatchError(expected=commit_sha, actual=head)
