from __future__ import annotations

from collections import OrderedDict

from passport.domain.ports.diagnostic_sink import DiagnosticSink


class DebugInfo(DiagnosticSink):
    """Insertion-ordered map of per-request debug values (e.g. the OTP sent)."""

    def __init__(self) -> None:
        self._values: OrderedDict[str, str] = OrderedDict()

    def record(self, key: str, value: str) -> None:
        self._values[key] = value

    def as_dict(self) -> dict[str, str]:
        return dict(self._values)

    def __bool__(self) -> bool:
        return bool(self._values)
