"""Language server wiring editor lifecycle events to lint cycles."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog
from lsprotocol import types as lsp
from pygls.lsp.server import LanguageServer
from pygls.uris import to_fs_path

from lutels.config.loader import load_config
from lutels.config.models import LintConfig
from lutels.core.errors import ConfigError
from lutels.lint.ops import LintOps

log = structlog.get_logger()

SERVER_NAME = "lutels"
SERVER_VERSION = "0.1.0"
SETTINGS_SECTION = "lutels"
LINT_DOCUMENT_COMMAND = "lutels.lintDocument"


class LutelsLanguageServer(LanguageServer):
    """pygls server carrying the lint session."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.settings: dict[str, Any] = {}
        self.lint_ops: LintOps | None = None


server = LutelsLanguageServer(SERVER_NAME, SERVER_VERSION)


# =============================================================================
# Session helpers
# =============================================================================


def _settings_kwargs(settings: Any) -> dict[str, Any]:
    """Pick the config sections out of an editor settings payload.

    Accepts either ``{"lutels": {"lint": {...}}}`` or ``{"lint": {...}}``.
    """
    if not isinstance(settings, dict):
        return {}
    section = settings.get(SETTINGS_SECTION, settings)
    if not isinstance(section, dict):
        return {}
    return {key: section[key] for key in ("lint", "logging") if isinstance(section.get(key), dict)}


def workspace_roots(ls: LanguageServer) -> list[Path]:
    roots: list[Path] = []
    for folder in ls.workspace.folders.values():
        fs_path = to_fs_path(folder.uri)
        if fs_path:
            roots.append(Path(fs_path))
    if not roots and ls.workspace.root_path:
        roots.append(Path(ls.workspace.root_path))
    return roots


def _load_lint_config(ls: LutelsLanguageServer, roots: list[Path]) -> LintConfig | None:
    try:
        config = load_config(roots[0] if roots else None, **_settings_kwargs(ls.settings))
    except ConfigError as e:
        log.error("config_load_failed", **e.to_dict())
        return None
    return config.lint


def _publisher(ls: LanguageServer):
    def publish(uri: str, diagnostics: list[lsp.Diagnostic]) -> None:
        ls.text_document_publish_diagnostics(
            lsp.PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
        )

    return publish


def session(ls: LutelsLanguageServer) -> LintOps:
    """The lint session, started on first use."""
    if ls.lint_ops is None:
        roots = workspace_roots(ls)
        config = _load_lint_config(ls, roots) or LintConfig()
        ls.lint_ops = LintOps(config, roots, _publisher(ls))
        log.info("session_started", roots=[str(r) for r in roots])
    return ls.lint_ops


def reload_session(ls: LutelsLanguageServer) -> None:
    """Re-read configuration; a failed load keeps the previous configuration."""
    ops = session(ls)
    roots = workspace_roots(ls)
    config = _load_lint_config(ls, roots)
    ops.reconfigure(config or ops.config, roots)


async def lint_uri(ls: LutelsLanguageServer, uri: str) -> None:
    document = ls.workspace.get_text_document(uri)
    await session(ls).lint_document(uri, document.source, document.language_id)


async def lint_open_documents(ls: LutelsLanguageServer) -> None:
    for uri in list(ls.workspace.text_documents):
        await lint_uri(ls, uri)


# =============================================================================
# Lifecycle
# =============================================================================


@server.feature(lsp.INITIALIZE)
def initialize(ls: LutelsLanguageServer, params: lsp.InitializeParams) -> None:
    ls.settings = params.initialization_options or {}
    ls.lint_ops = None


@server.feature(lsp.INITIALIZED)
async def initialized(ls: LutelsLanguageServer, params: lsp.InitializedParams) -> None:
    session(ls)
    await lint_open_documents(ls)


@server.feature(lsp.SHUTDOWN)
def shutdown(ls: LutelsLanguageServer, params: None) -> None:
    if ls.lint_ops is not None:
        ls.lint_ops.shutdown()
        ls.lint_ops = None
    log.info("session_stopped")


@server.feature(lsp.TEXT_DOCUMENT_DID_OPEN)
async def did_open(ls: LutelsLanguageServer, params: lsp.DidOpenTextDocumentParams) -> None:
    await lint_uri(ls, params.text_document.uri)


@server.feature(lsp.TEXT_DOCUMENT_DID_SAVE)
async def did_save(ls: LutelsLanguageServer, params: lsp.DidSaveTextDocumentParams) -> None:
    await lint_uri(ls, params.text_document.uri)


@server.feature(lsp.TEXT_DOCUMENT_DID_CLOSE)
def did_close(ls: LutelsLanguageServer, params: lsp.DidCloseTextDocumentParams) -> None:
    session(ls).close_document(params.text_document.uri)


@server.command(LINT_DOCUMENT_COMMAND)
async def lint_document_command(ls: LutelsLanguageServer, uri: str) -> None:
    """Lint a document on demand; clients send this when an editor gains focus."""
    await lint_uri(ls, uri)


@server.feature(lsp.WORKSPACE_DID_CHANGE_CONFIGURATION)
async def did_change_configuration(
    ls: LutelsLanguageServer, params: lsp.DidChangeConfigurationParams
) -> None:
    if params.settings is not None:
        ls.settings = params.settings
    reload_session(ls)
    await lint_open_documents(ls)


@server.feature(lsp.WORKSPACE_DID_CHANGE_WORKSPACE_FOLDERS)
def did_change_workspace_folders(
    ls: LutelsLanguageServer, params: lsp.DidChangeWorkspaceFoldersParams
) -> None:
    reload_session(ls)


# =============================================================================
# Quick fixes
# =============================================================================


@server.feature(
    lsp.TEXT_DOCUMENT_CODE_ACTION,
    lsp.CodeActionOptions(code_action_kinds=[lsp.CodeActionKind.QuickFix]),
)
def code_action(ls: LutelsLanguageServer, params: lsp.CodeActionParams) -> list[lsp.CodeAction]:
    only = params.context.only
    if only and lsp.CodeActionKind.QuickFix not in only:
        return []
    return session(ls).code_actions(params.text_document.uri, params.range)


def start_io() -> None:
    server.start_io()


def start_tcp(host: str, port: int) -> None:
    server.start_tcp(host, port)
