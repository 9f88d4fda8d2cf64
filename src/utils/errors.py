"""
Exception hierarchy for the prospect persona pipeline.

Three families, each handled differently:
- InputValidationError: rejected immediately, no partial work.
- PreconditionError: a required upstream artifact is missing.
- FetchError: a network collaborator failed; the scanner recovers it
  locally as an empty result and never lets it escape.
"""


class ProspectIntelError(Exception):
    """Base class for all pipeline errors."""


class InputValidationError(ProspectIntelError, ValueError):
    """Caller input is missing or malformed."""


class PreconditionError(ProspectIntelError):
    """
    An operation was requested before the state it depends on exists.

    Attributes:
        precondition: Short machine-readable name of the missing precondition
    """

    precondition = "unknown"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class PersonNotFoundError(PreconditionError):
    precondition = "person_exists"

    def __init__(self, person_id: str) -> None:
        super().__init__(f"Person not found: {person_id}")
        self.person_id = person_id


class PersonaNotFoundError(PreconditionError):
    precondition = "persona_exists"

    def __init__(self, person_id: str) -> None:
        super().__init__(
            f"Persona not found for person {person_id}. Run persona analysis first."
        )
        self.person_id = person_id


class ProfileNotConfirmedError(PreconditionError):
    precondition = "profile_confirmed"

    def __init__(self, profile_id: str, status: str) -> None:
        super().__init__(
            f"Profile {profile_id} has status '{status}'; only confirmed profiles can be scanned"
        )
        self.profile_id = profile_id
        self.status = status


class NoConfirmedProfilesError(PreconditionError):
    precondition = "confirmed_profiles_exist"

    def __init__(self, person_id: str) -> None:
        super().__init__(f"No confirmed profiles found for person {person_id}")
        self.person_id = person_id


class FetchError(ProspectIntelError):
    """A network fetch failed (unreachable, HTTP error, bad payload)."""

    def __init__(self, network: str, message: str) -> None:
        super().__init__(f"[{network}] {message}")
        self.network = network


class MalformedResponseError(FetchError):
    """The upstream payload could not be interpreted."""


class ScannerConfigurationError(FetchError):
    """The strategy is missing credentials or an endpoint."""
