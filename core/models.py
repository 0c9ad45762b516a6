"""
core/models.py -- Shared banking vocabulary: accesses, accounts, challenge answers.

Pure data containers with zero logic. auth/ and jobs/ both build on these
shapes, so they live in the kernel rather than in either package.
"""

from dataclasses import dataclass, field

# ---------------------------------------------------------------------------
# Domain constants
# ---------------------------------------------------------------------------

# Prefix of the job URI handed back to clients. Clients append it to /v1.
JOB_URI_PREFIX = "/jobs/"


@dataclass
class Account:
    id: str
    name: str = ""
    number: str = ""
    iban: str = ""
    supported: bool = True


@dataclass
class Access:
    """A linked group of accounts at one provider.

    Registered as a template in the access catalog and copied onto a user
    once a job against that provider authenticates successfully.
    """

    id: str
    provider_id: str
    name: str = ""
    accounts: list[Account] = field(default_factory=list)


@dataclass
class ChallengeAnswer:
    """One answer to a named challenge, e.g. ChallengeAnswer("pin", "1234")."""

    id: str
    value: str
