"""
Error kinds raised while acquiring a market dataset.

AcquisitionError subclasses carry a user-facing message and are recovered into
the single error slot of the acquisition state. StateTransitionError marks an
action that the current mode does not accept (a programming/UI bug, not a
user mistake).
"""


class AcquisitionError(Exception):
    """Base class for errors shown to the user under the form."""


class ValidationError(AcquisitionError):
    """One or more required form fields are empty."""


class ParseError(AcquisitionError):
    """Test JSON text is empty or not valid JSON."""


class TransportError(AcquisitionError):
    """Remote lookup failed (non-2xx status, network error, unreadable body)."""


class RecordFormatError(AcquisitionError):
    """Parsed document is not a JSON object, so it cannot be a market record."""


class StateTransitionError(RuntimeError):
    """Action is not allowed in the current mode."""


class BusyError(StateTransitionError):
    """A load is in flight; every user action is rejected until it completes."""
