"""Ballotlib - a single-election engine with voting by delegation.

An election is run by its chairperson, who sets up two time windows, one
for nominating candidates and one for voting, and gives voters the right to
vote. Every voter can either vote for a candidate directly or delegate their
voting weight to another voter, who then votes with the accumulated weight.
The candidate with the most weight wins.

The :class:`Election` object from the :mod:`election` module holds the whole
state and exposes all the operations; the remaining modules hold its
building blocks:

-   :mod:`voter` and :mod:`candidate` contain the records and registries,
-   :mod:`phase` handles the time windows,
-   :mod:`delegation` follows delegation chains and moves weight,
-   :mod:`tally` determines the winner,
-   :mod:`script` replays recorded operations (also from the command line,
    using ``python -m ballotlib``).
"""

from ballotlib.election import Election, SerializedElection
from ballotlib.errors import (
    ElectionError,
    Unauthorized,
    AlreadyVoted,
    AlreadyEnrolled,
    NotEligible,
    SelfDelegation,
    DelegationCycle,
    PhaseClosed,
    InvalidCandidate,
    NoWinner,
)
