'''Voter records and the registry mapping principals to them.

A principal is any hashable object identifying an external caller (usually
a string such as an account name or address). Each principal has at most
one :class:`Voter` record; principals never seen before are treated as
voters with zero weight that have not voted.

What a voter did with their vote is held in a status value, one of:

-   :data:`NOT_VOTED` - the voter still holds their vote,
-   :class:`VotedDirectly` - the voter cast a vote for a candidate,
-   :class:`Delegated` - the voter handed their weight to another voter.

Both of the latter are terminal; a voter in either of them can neither vote
nor delegate again.
'''

from __future__ import annotations

import dataclasses
from typing import Any, Dict, Hashable, Iterator, Optional, Tuple, Union

from ballotlib.persist import simple_serialization


Principal = Hashable


@simple_serialization
@dataclasses.dataclass(frozen=True)
class NotVoted:
    '''Status of a voter who has neither voted nor delegated.'''


NOT_VOTED = NotVoted()


@simple_serialization
@dataclasses.dataclass(frozen=True)
class VotedDirectly:
    '''Status of a voter who cast a vote for a candidate.

    :param candidate_id: ID of the candidate voted for.
    '''
    candidate_id: int


@simple_serialization
@dataclasses.dataclass(frozen=True)
class Delegated:
    '''Status of a voter who delegated their vote.

    :param target: The terminal voter of the delegation chain at the time
        of delegation, i.e. the voter that received the weight.
    '''
    target: Principal


VoterStatus = Union[NotVoted, VotedDirectly, Delegated]


@simple_serialization
class Voter:
    '''Voting state of a single principal.

    :param weight: Accumulated voting power. It is 1 upon enrollment and
        grows by receiving delegated weight. Weight delegated to a principal
        that was never enrolled is kept here but cannot be used.
    :param status: What the voter has done with their vote.
    :param enrolled: Whether the principal was given the right to vote.
    '''
    def __init__(self,
                 weight: int = 0,
                 status: VoterStatus = NOT_VOTED,
                 enrolled: bool = False,
                 ):
        self.weight = weight
        self.status = status
        self.enrolled = enrolled

    @property
    def has_voted(self) -> bool:
        '''Whether the voter voted directly or delegated.'''
        return not isinstance(self.status, NotVoted)

    @property
    def delegate_to(self) -> Optional[Principal]:
        if isinstance(self.status, Delegated):
            return self.status.target
        return None

    @property
    def voted_candidate_id(self) -> int:
        '''ID of the candidate voted for directly, 0 if there is none.'''
        if isinstance(self.status, VotedDirectly):
            return self.status.candidate_id
        return 0

    @property
    def is_enrolled(self) -> bool:
        return self.enrolled

    def __repr__(self) -> str:
        return f'<Voter({self.weight},{self.status!r})>'


class IdentityRegistry:
    '''Mapping of principals to their voter records.

    Lookups of unknown principals return a fresh default record that is not
    stored; records only get stored through :meth:`record`, when a voter is
    actually mutated.
    '''
    def __init__(self):
        self._voters: Dict[Principal, Voter] = {}

    def get(self, principal: Principal) -> Voter:
        try:
            return self._voters[principal]
        except KeyError:
            return Voter()

    def record(self, principal: Principal) -> Voter:
        '''Return the stored record for the principal, creating it if needed.'''
        if principal not in self._voters:
            self._voters[principal] = Voter()
        return self._voters[principal]

    def __contains__(self, principal: Principal) -> bool:
        return principal in self._voters

    def __len__(self) -> int:
        return len(self._voters)

    def __iter__(self) -> Iterator[Principal]:
        return iter(self._voters)

    def items(self) -> Iterator[Tuple[Principal, Voter]]:
        return iter(self._voters.items())

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': 'dict',
            'keys': list(self._voters.keys()),
            'values': [voter.to_dict() for voter in self._voters.values()],
        }
