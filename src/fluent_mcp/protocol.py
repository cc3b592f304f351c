"""MCP protocol revision negotiation.

The server speaks two revisions of the protocol. Each client session
negotiates one of them during its initialize handshake and keeps it for the
lifetime of the session:

- ``2024-11-05`` (legacy) is chosen only when the client asks for exactly
  that revision.
- ``2025-03-26`` (modern) is chosen for every other request, including
  unknown or future revisions, and is assumed when a session is queried
  before any handshake.
"""

import logging
import weakref
from enum import Enum
from typing import Any, Optional

logger = logging.getLogger(__name__)


class ProtocolRevision(str, Enum):
    """Protocol revisions the server can negotiate."""

    LEGACY = "2024-11-05"
    MODERN = "2025-03-26"


SUPPORTED_REVISIONS = [ProtocolRevision.LEGACY.value, ProtocolRevision.MODERN.value]


class NegotiationState(str, Enum):
    """Negotiation state of a single session."""

    UNNEGOTIATED = "unnegotiated"
    NEGOTIATED = "negotiated"


class ProtocolNegotiator:
    """Negotiated protocol revision for one client session.

    The first handshake fixes the revision; later handshakes are ignored.
    """

    def __init__(self):
        self._revision: Optional[ProtocolRevision] = None

    @property
    def state(self) -> NegotiationState:
        if self._revision is None:
            return NegotiationState.UNNEGOTIATED
        return NegotiationState.NEGOTIATED

    @property
    def is_negotiated(self) -> bool:
        return self._revision is not None

    @property
    def revision(self) -> ProtocolRevision:
        """Negotiated revision, or the modern revision if none yet.

        Reading the revision never changes the negotiation state.
        """
        return self._revision or ProtocolRevision.MODERN

    def handshake(self, requested: Any) -> ProtocolRevision:
        """Negotiate a revision from the one requested by the client.

        Args:
            requested: Protocol version string sent in the initialize request

        Returns:
            The revision in effect for this session
        """
        if self._revision is not None:
            logger.debug(
                f"Session already negotiated {self._revision.value}, "
                f"ignoring handshake for {requested!r}"
            )
            return self._revision

        if requested == ProtocolRevision.LEGACY.value:
            self._revision = ProtocolRevision.LEGACY
        else:
            self._revision = ProtocolRevision.MODERN

        logger.info(
            f"Negotiated protocol revision {self._revision.value} "
            f"(client requested {requested!r})"
        )
        return self._revision


class SessionNegotiators:
    """One ProtocolNegotiator per live client session.

    Sessions are held weakly so a closed connection releases its state.
    """

    def __init__(self):
        self._negotiators: "weakref.WeakKeyDictionary[Any, ProtocolNegotiator]" = (
            weakref.WeakKeyDictionary()
        )

    def for_session(self, session: Any) -> ProtocolNegotiator:
        """Get the negotiator for ``session``, creating it on first use.

        If the session has completed its initialize handshake and the
        negotiator has not yet seen it, the client's requested revision is
        negotiated now.

        Args:
            session: Server session object (``mcp.server.session.ServerSession``)

        Returns:
            ProtocolNegotiator bound to the session. A detached,
            unnegotiated negotiator when there is no session.
        """
        if session is None:
            return ProtocolNegotiator()

        negotiator = self._negotiators.get(session)
        if negotiator is None:
            negotiator = ProtocolNegotiator()
            self._negotiators[session] = negotiator

        if not negotiator.is_negotiated:
            client_params = getattr(session, "client_params", None)
            if client_params is not None:
                negotiator.handshake(getattr(client_params, "protocolVersion", None))

        return negotiator

    def __len__(self) -> int:
        return len(self._negotiators)
