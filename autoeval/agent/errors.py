# autoeval/agent/errors.py

class AnalysisError(Exception):
    """Any failure that aborts a vehicle analysis."""


class TransportError(AnalysisError):
    """The upstream call could not complete (network, auth, quota, cancellation)."""


class RetrievalError(TransportError):
    """Stage 1 (grounded market facts) failed."""


class SynthesisError(TransportError):
    """Stage 2 (structured reasoning) failed."""


class FormatError(AnalysisError):
    """Upstream text could not be read as the expected JSON object."""


class AnalysisFormatError(FormatError):
    """Stage 2 payload failed the format check."""


class SessionError(Exception):
    pass


class SessionClosedError(SessionError):
    """send() on a conversation that was already closed."""


class SessionBusyError(SessionError):
    """send() while a previous turn is still awaiting its reply."""
