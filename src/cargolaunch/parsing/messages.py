"""
Cargo stdout message parsing.

Cargo run with --message-format=json prints one JSON object per line, but the
stream can be interleaved with plain text (for example from build scripts).
Lines starting with '{' are parsed as JSON; a parse failure is logged and the
line dropped so that one bad line never aborts a build.
"""

import json
import logging
from typing import Any, List, Mapping, Optional

from ..errors import ParseError
from ..models.artifacts import CompilationArtifact
from ..models.messages import (
    REASON_COMPILER_ARTIFACT,
    REASON_COMPILER_MESSAGE,
    CargoMessage,
    CompilerArtifactMessage,
    CompilerDiagnosticMessage,
    OtherMessage,
    ParsedLine,
    PlainLine,
    StructuredLine,
)

logger = logging.getLogger(__name__)

DEBUG_SYMBOL_BUNDLE_SUFFIX = ".dSYM"


class MessageParser:
    """Turns raw stdout lines into structured cargo messages."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or globals()["logger"]

    def parse_line(self, line: str) -> Optional[ParsedLine]:
        """
        Classify one stdout line.

        Returns:
            StructuredLine for a JSON object, PlainLine for anything not
            starting with '{', or None for a malformed JSON line
        """
        if not line.startswith("{"):
            return PlainLine(line)

        try:
            payload = json.loads(line)
            if not isinstance(payload, dict):
                raise ValueError(f"expected a JSON object, got {type(payload).__name__}")
        except ValueError as e:
            error = ParseError(line, str(e))
            self.logger.warning(str(error))
            return None
        return StructuredLine(payload)

    def classify(self, payload: Mapping[str, Any]) -> CargoMessage:
        """
        Map a JSON payload onto the message variant for its ``reason``.

        Malformed known messages are logged and returned as OtherMessage.
        """
        reason = payload.get("reason")
        try:
            if reason == REASON_COMPILER_ARTIFACT:
                return self._artifact_message(payload)
            if reason == REASON_COMPILER_MESSAGE:
                return CompilerDiagnosticMessage(
                    rendered=_require_str(payload["message"]["rendered"], "message.rendered"))
        except (KeyError, TypeError, IndexError) as e:
            self.logger.warning(f"Ignoring malformed '{reason}' message ({type(e).__name__}: {e})")
        return OtherMessage(reason=reason, payload=dict(payload))

    def _artifact_message(self, payload: Mapping[str, Any]) -> CompilerArtifactMessage:
        target = payload["target"]
        target_name = _require_str(target["name"], "target.name")
        if not isinstance(target["kind"], list):
            raise TypeError(f"target.kind must be a list, got {type(target['kind']).__name__}")
        kinds = tuple(_require_str(kind, "target.kind") for kind in target["kind"])
        profile = payload.get("profile") or {}
        if not isinstance(profile, Mapping):
            raise TypeError(f"profile must be an object, got {type(profile).__name__}")

        return CompilerArtifactMessage(
            target_name=target_name,
            target_kinds=kinds,
            profile_test=bool(profile.get("test", False)),
            outputs=tuple(self._artifact_outputs(payload, target_name, kinds)),
        )

    def _artifact_outputs(self, payload: Mapping[str, Any], target_name: str, kinds) -> List[CompilationArtifact]:
        # Newer cargo reports the runnable binary directly.
        if "executable" in payload:
            executable = payload["executable"]
            if executable is None:
                return []
            return [CompilationArtifact(
                file_path=_require_str(executable, "executable"),
                target_name=target_name,
                target_kind=kinds[0] if kinds else "",
            )]

        # Older cargo: filenames are index-aligned with target.kind.
        outputs = []
        for i, file_name in enumerate(payload.get("filenames") or []):
            if file_name is None:
                continue
            if _require_str(file_name, f"filenames[{i}]").endswith(DEBUG_SYMBOL_BUNDLE_SUFFIX):
                continue
            if i < len(kinds):
                kind = kinds[i]
            else:
                kind = kinds[-1] if kinds else ""
            outputs.append(CompilationArtifact(
                file_path=file_name,
                target_name=target_name,
                target_kind=kind,
            ))
        return outputs


def _require_str(value: Any, field: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{field} must be a string, got {type(value).__name__}")
    return value
