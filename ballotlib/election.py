'''The election state machine and its public operations.

An :class:`Election` is created by its chairperson, the only principal
allowed to set up the phases, nominate candidates and give others the right
to vote. Enrolled voters then vote for a candidate or delegate their weight
to another voter while the voting phase is open, and anyone can ask for the
winner at any time.

Every operation takes the calling principal as its first argument and,
if it is gated by a phase, the current time as ``now``. All checks of an
operation run before its first change of state, so a rejected operation
(raising an :class:`ballotlib.errors.ElectionError`) leaves the election
exactly as it was.

The election assumes that its operations are executed one at a time. If it
is to be shared between threads, wrap it in a :class:`SerializedElection`.
'''

import functools
import logging
import threading
from numbers import Real
from typing import Any, Dict, List, Tuple

import ballotlib.tally
from ballotlib.candidate import Candidate, CandidateRegistry
from ballotlib.delegation import DelegationResolver
from ballotlib.errors import (
    AlreadyEnrolled,
    AlreadyVoted,
    NotEligible,
    PhaseClosed,
    SelfDelegation,
    Unauthorized,
)
from ballotlib.persist import scoped_class_name
from ballotlib.phase import NOMINATION, VOTING, Phase, PhaseController
from ballotlib.voter import IdentityRegistry, Principal, Voter, VotedDirectly


logger = logging.getLogger(__name__)


class Election:
    '''A single election with voting by delegation.

    The chairperson is enrolled with a weight of 1 upon creation.

    :param chairperson: Principal creating the election. It becomes the only
        privileged principal for its whole lifetime.
    :param created_at: Time of creation; the phase windows are relative to it.
    '''
    def __init__(self, chairperson: Principal, created_at: Real = 0):
        self._chairperson = chairperson
        self.phases = PhaseController(created_at)
        self.voters = IdentityRegistry()
        self.candidates = CandidateRegistry()
        self.resolver = DelegationResolver(self.voters, self.candidates)
        self._enroll(chairperson)
        self._voter_count = 1
        logger.info('election created by %s at %s', chairperson, created_at)

    @property
    def chairperson(self) -> Principal:
        return self._chairperson

    @property
    def created_at(self) -> Real:
        return self.phases.created_at

    @property
    def voter_count(self) -> int:
        '''Number of principals that have been given the right to vote.'''
        return self._voter_count

    @property
    def candidate_count(self) -> int:
        return len(self.candidates)

    def is_chairperson(self, principal: Principal) -> bool:
        return principal == self._chairperson

    def _check_chairperson(self, caller: Principal, operation: str) -> None:
        if not self.is_chairperson(caller):
            raise Unauthorized(caller, operation)

    def _enroll(self, principal: Principal) -> None:
        voter = self.voters.record(principal)
        voter.weight = 1
        voter.enrolled = True

    # phases
    def set_nomination_phase(self,
                             caller: Principal,
                             start: int,
                             duration: int,
                             ) -> None:
        '''Set the window for nominating candidates.

        :param start: Offset of the window start from the creation time.
        :param duration: Length of the window.
        :raises Unauthorized: If the caller is not the chairperson.
        '''
        self._check_chairperson(caller, 'set nomination phase')
        self.phases.set_nomination(start, duration)

    def set_voting_phase(self,
                         caller: Principal,
                         start: int,
                         duration: int,
                         ) -> None:
        '''Set the window for voting and delegating.

        :param start: Offset of the window start from the creation time.
        :param duration: Length of the window.
        :raises Unauthorized: If the caller is not the chairperson.
        '''
        self._check_chairperson(caller, 'set voting phase')
        self.phases.set_voting(start, duration)

    def is_nomination_open(self, now: Real) -> bool:
        return self.phases.is_nomination_open(now)

    def is_voting_open(self, now: Real) -> bool:
        return self.phases.is_voting_open(now)

    def phase(self, name: str) -> Phase:
        '''Return the current setting of the named phase.'''
        return self.phases.get(name)

    # nomination and enrollment
    def add_candidate(self, caller: Principal, name: str, now: Real) -> int:
        '''Nominate a candidate.

        :param name: Name of the candidate. Duplicate names are allowed.
        :returns: ID of the new candidate.
        :raises Unauthorized: If the caller is not the chairperson.
        :raises PhaseClosed: If the nomination phase is not open.
        '''
        self._check_chairperson(caller, 'add candidate')
        if not self.is_nomination_open(now):
            raise PhaseClosed(NOMINATION, now)
        candidate = self.candidates.add(name)
        logger.info('candidate %d nominated: %s', candidate.id, name)
        return candidate.id

    def give_right_to_vote(self, caller: Principal, voter: Principal) -> None:
        '''Enroll a voter with a weight of 1.

        :raises Unauthorized: If the caller is not the chairperson.
        :raises AlreadyVoted: If the voter has already voted.
        :raises AlreadyEnrolled: If the voter already has a nonzero weight.
        '''
        self._check_chairperson(caller, 'give right to vote')
        current = self.voters.get(voter)
        if current.has_voted:
            raise AlreadyVoted(voter)
        if current.weight != 0:
            raise AlreadyEnrolled(voter)
        self._enroll(voter)
        self._voter_count += 1
        logger.info('%s given the right to vote', voter)

    # voting
    def _check_can_vote(self, caller: Principal) -> Voter:
        voter = self.voters.get(caller)
        if not voter.is_enrolled:
            raise NotEligible(caller)
        if voter.has_voted:
            raise AlreadyVoted(caller)
        return voter

    def delegate(self, caller: Principal, to: Principal, now: Real) -> Principal:
        '''Delegate the caller's vote to another voter.

        The delegation goes to the end of the chain of delegations starting
        at the given voter. If that voter has already voted, the caller's
        weight is added to the candidate they voted for; otherwise it is
        added to their weight.

        :param to: The voter to delegate to. Need not be enrolled, but weight
            delegated to a principal without the right to vote is lost.
        :returns: The voter at the end of the chain that received the weight.
        :raises NotEligible: If the caller has no right to vote.
        :raises AlreadyVoted: If the caller has already voted or delegated.
        :raises SelfDelegation: If the caller names themselves.
        :raises DelegationCycle: If the chain leads back to the caller.
        :raises PhaseClosed: If the voting phase is not open.
        '''
        self._check_can_vote(caller)
        if to == caller:
            raise SelfDelegation(caller)
        # only enrolled voters delegate, so a chain has at most voter_count links
        final_target, _ = self.resolver.resolve(
            caller, to, max_hops=self._voter_count
        )
        if not self.is_voting_open(now):
            raise PhaseClosed(VOTING, now)
        self.resolver.transfer(caller, final_target)
        return final_target

    def vote(self, caller: Principal, candidate_id: int, now: Real) -> None:
        '''Vote for a candidate with the caller's full accumulated weight.

        :raises NotEligible: If the caller has no right to vote.
        :raises AlreadyVoted: If the caller has already voted or delegated.
        :raises InvalidCandidate: If there is no candidate with the ID.
        :raises PhaseClosed: If the voting phase is not open.
        '''
        self._check_can_vote(caller)
        self.candidates.check_id(candidate_id)
        if not self.is_voting_open(now):
            raise PhaseClosed(VOTING, now)
        candidate = self.candidates.get(candidate_id)
        voter = self.voters.record(caller)
        voter.status = VotedDirectly(candidate_id)
        candidate.vote_count += voter.weight
        logger.info('%s voted for %s with weight %d',
                    caller, candidate.name, voter.weight)

    # results
    def winning_candidate(self) -> int:
        '''Return the ID of the leading candidate, 0 if there is none.'''
        return ballotlib.tally.winning_candidate(self.candidates)

    def winner_name(self) -> str:
        '''Return the name of the leading candidate.

        :raises NoWinner: If there are no candidates or no counted votes.
        '''
        return ballotlib.tally.winner_name(self.candidates)

    def leaders(self) -> List[Candidate]:
        return ballotlib.tally.leaders(self.candidates)

    def standings(self) -> List[Tuple[Candidate, int]]:
        return ballotlib.tally.standings(self.candidates)

    def vote_totals(self) -> Dict[int, int]:
        return ballotlib.tally.vote_totals(self.candidates)

    # read accessors
    def voter(self, principal: Principal) -> Voter:
        return self.voters.get(principal)

    def candidate(self, candidate_id: int) -> Candidate:
        return self.candidates.get(candidate_id)

    def delegated(self, principal: Principal) -> bool:
        return self.voters.get(principal).delegate_to is not None

    def directly_voted(self, principal: Principal) -> bool:
        return isinstance(self.voters.get(principal).status, VotedDirectly)

    def delegation_chain(self, principal: Principal) -> List[Principal]:
        '''Return the voters the principal's delegation passes through.'''
        return self.resolver.chain(principal, max_hops=self._voter_count)

    def to_dict(self) -> Dict[str, Any]:
        '''Return a JSON-ready snapshot of the election state.'''
        return {
            'class': scoped_class_name(self),
            'chairperson': self._chairperson,
            'created_at': self.created_at,
            'nomination': self.phases.nomination.to_dict(),
            'voting': self.phases.voting.to_dict(),
            'voter_count': self._voter_count,
            'candidate_count': self.candidate_count,
            'voters': self.voters.to_dict(),
            'candidates': self.candidates.to_dict(),
        }


class SerializedElection:
    '''An election that can be shared between threads.

    Every operation and read of the wrapped election runs under a single
    lock, so that operations are applied one whole operation at a time.
    Records returned by the reads are the live records of the election
    and should not be modified.

    :param election: The election to guard. It must not be used directly
        by anyone else while wrapped.
    '''
    def __init__(self, election: Election):
        self.election = election
        self._lock = threading.RLock()

    def __getattr__(self, name: str) -> Any:
        with self._lock:
            attr = getattr(self.election, name)
        if callable(attr):
            @functools.wraps(attr)
            def locked(*args, **kwargs):
                with self._lock:
                    return attr(*args, **kwargs)
            return locked
        return attr
