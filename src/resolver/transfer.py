"""Transfer listener that reports downloads and uploads through logging."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from common.logging_utils import extra_context, is_debug_enabled, safe_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransferEvent:
    """A single transfer between a remote repository and the local one."""

    repository_url: str
    resource: str
    size: int = -1
    transferred: int = 0
    error: Optional[BaseException] = None

    @property
    def target(self) -> str:
        base = safe_url(self.repository_url).rstrip("/")
        return f"{base}/{self.resource.lstrip('/')}"


class LogTransferListener:
    """Logs transfer life-cycle events reported by the resolver service."""

    def transfer_initiated(self, event: TransferEvent) -> None:
        if is_debug_enabled(logger):
            logger.debug(
                "Transfer started",
                extra=extra_context(
                    event="transfer_initiated",
                    component="transfer",
                    target=event.target,
                ),
            )

    def transfer_succeeded(self, event: TransferEvent) -> None:
        logger.info(
            "%s: %s downloaded",
            event.target,
            _bytes(event.transferred),
            extra=extra_context(
                event="transfer_succeeded",
                component="transfer",
                outcome="success",
                target=event.target,
                count=event.transferred,
            ),
        )

    def transfer_corrupted(self, event: TransferEvent) -> None:
        logger.warning(
            "%s: checksum mismatch (%s)",
            event.target,
            event.error,
            extra=extra_context(
                event="transfer_corrupted",
                component="transfer",
                outcome="corrupted",
                target=event.target,
            ),
        )

    def transfer_failed(self, event: TransferEvent) -> None:
        logger.debug(
            "%s: failed (%s)",
            event.target,
            event.error,
            extra=extra_context(
                event="transfer_failed",
                component="transfer",
                outcome="failed",
                target=event.target,
            ),
        )


def _bytes(size: int) -> str:
    if size < 0:
        return "unknown size"
    if size < 1024:
        return f"{size} bytes"
    return f"{size / 1024:.1f} KiB"
