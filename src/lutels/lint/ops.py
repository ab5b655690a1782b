"""Lint orchestration - one lint cycle per document trigger."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

import structlog
from lsprotocol import types as lsp
from pygls.uris import to_fs_path

from lutels.config.models import LintConfig
from lutels.config.user_config import RuntimeState, state_path, write_runtime_state
from lutels.core.errors import ToolchainNotFoundError
from lutels.core.logging import lint_cycle
from lutels.lint.config_path import resolve_config_path
from lutels.lint.invoker import invoke_linter, rule_args_for
from lutels.lint.models import LintOutcome, ResolvedToolchain
from lutels.lint.registry import ActionRegistry
from lutels.lint.toolchain import bundled_binary_path, resolve_toolchain
from lutels.lint.translate import translate_violations

log = structlog.get_logger()

PublishDiagnostics = Callable[[str, list[lsp.Diagnostic]], None]


class LintOps:
    """Lint session state and the lint cycle.

    One instance lives for one editor session. It owns the resolved toolchain,
    the per-document generation counters and the action registry; diagnostics
    leave through the ``publish`` callback.
    """

    def __init__(
        self,
        config: LintConfig,
        workspace_roots: Sequence[Path],
        publish: PublishDiagnostics,
        *,
        registry: ActionRegistry | None = None,
        home: Path | None = None,
        persist_state: bool = True,
    ) -> None:
        self._config = config
        self._workspace_roots = list(workspace_roots)
        self._publish = publish
        self._home = home
        self._persist_state = persist_state
        self.registry = registry or ActionRegistry()
        self._toolchain: ResolvedToolchain | None = None
        self._generations: dict[str, int] = {}

    @property
    def config(self) -> LintConfig:
        return self._config

    @property
    def workspace_roots(self) -> list[Path]:
        return list(self._workspace_roots)

    def reconfigure(
        self, config: LintConfig, workspace_roots: Sequence[Path] | None = None
    ) -> None:
        """Swap configuration and forget the resolved toolchain."""
        self._config = config
        if workspace_roots is not None:
            self._workspace_roots = list(workspace_roots)
        self._toolchain = None

    def shutdown(self) -> None:
        """Drop all session state."""
        for uri in list(self._generations):
            self.registry.clear(uri)
        self._generations.clear()
        self._toolchain = None

    def is_lintable(self, language_id: str | None) -> bool:
        return language_id is None or language_id in self._config.languages

    def workspace_root_for(self, uri: str) -> Path | None:
        """Workspace folder containing the document, if any."""
        fs_path = to_fs_path(uri)
        if not fs_path:
            return None
        path = Path(fs_path)
        for root in self._workspace_roots:
            if path.is_relative_to(root):
                return root
        return None

    # =========================================================================
    # Toolchain
    # =========================================================================

    async def ensure_toolchain(self) -> ResolvedToolchain | None:
        """Resolve the toolchain once per session. Failures are retried next time."""
        if self._toolchain is not None:
            return self._toolchain

        resolved = await resolve_toolchain(
            self._config.executable_path, self._workspace_roots, home=self._home
        )
        if resolved is None:
            resolved = self._bundled_toolchain()
            if resolved is None:
                return None
        elif resolved.origin == "foreman":
            self._remember(resolved)

        self._toolchain = resolved
        return resolved

    def _bundled_toolchain(self) -> ResolvedToolchain | None:
        path = self._config.bundled_executable or str(bundled_binary_path())
        if not Path(path).is_file():
            err = ToolchainNotFoundError.bundled_missing(path)
            log.error("toolchain_not_found", **err.to_dict())
            return None
        log.info("toolchain_bundled_fallback", executable=path)
        return ResolvedToolchain(executable_path=path, origin="bundled")

    def _remember(self, resolved: ResolvedToolchain) -> None:
        """Keep a foreman discovery for this and future sessions."""
        self._config = self._config.model_copy(
            update={
                "executable_path": resolved.executable_path,
                "toolchain_manifest_directory": resolved.rule_config_directory,
            }
        )
        if not self._persist_state or resolved.rule_config_directory is None:
            return
        path = state_path(Path(resolved.rule_config_directory))
        try:
            write_runtime_state(
                path,
                RuntimeState(
                    executable_path=resolved.executable_path,
                    toolchain_manifest_directory=resolved.rule_config_directory,
                ),
            )
        except OSError as e:
            log.warning("runtime_state_write_failed", path=str(path), error=str(e))
            return
        log.info("runtime_state_written", path=str(path))

    # =========================================================================
    # Lint cycle
    # =========================================================================

    def _begin(self, uri: str) -> int:
        generation = self._generations.get(uri, 0) + 1
        self._generations[uri] = generation
        return generation

    def _is_current(self, uri: str, generation: int) -> bool:
        return self._generations.get(uri) == generation

    async def lint_document(
        self, uri: str, source: str, language_id: str | None = None
    ) -> LintOutcome | None:
        """Run one lint cycle and publish its results.

        Returns None when nothing was published: unsupported language, no
        toolchain, or a newer cycle for the same document started meanwhile.
        Prior diagnostics and actions are left untouched in those cases.
        """
        if not self.is_lintable(language_id):
            log.debug("lint_skipped_language", uri=uri, language_id=language_id)
            return None

        generation = self._begin(uri)
        with lint_cycle(uri, generation):
            return await self._lint(uri, source, generation)

    async def _lint(self, uri: str, source: str, generation: int) -> LintOutcome | None:
        toolchain = await self.ensure_toolchain()
        if toolchain is None:
            log.warning("lint_skipped_no_toolchain")
            return None

        cwd = toolchain.rule_config_directory or self._config.toolchain_manifest_directory
        timeout_sec = self._config.timeout_sec

        violations = await invoke_linter(
            toolchain.executable_path, rule_args_for(), source, cwd, timeout_sec=timeout_sec
        )
        invocations = 1

        if self._config.rule_config_path:
            rules_path = resolve_config_path(
                self._config.rule_config_path, self.workspace_root_for(uri)
            )
            log.info("lint_custom_rules", rules_path=rules_path)
            violations = violations + await invoke_linter(
                toolchain.executable_path,
                rule_args_for(rules_path),
                source,
                cwd,
                timeout_sec=timeout_sec,
            )
            invocations += 1

        if not self._is_current(uri, generation):
            log.info("lint_result_stale", latest=self._generations.get(uri))
            return None

        diagnostics, actions = translate_violations(uri, violations)
        self.registry.publish(uri, actions)
        self._publish(uri, diagnostics)
        log.info("lint_published", diagnostics=len(diagnostics), fixes=len(actions))

        return LintOutcome(
            uri=uri,
            generation=generation,
            diagnostics=diagnostics,
            actions=actions,
            invocations=invocations,
        )

    def close_document(self, uri: str) -> None:
        """Forget a document: pending cycles become stale, fixes and diagnostics go."""
        self._begin(uri)
        self.registry.clear(uri)
        self._publish(uri, [])

    def code_actions(self, uri: str, range: lsp.Range) -> list[lsp.CodeAction]:
        return self.registry.query(uri, range)
