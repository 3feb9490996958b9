'''Election rule violations.

Every operation of an :class:`ballotlib.election.Election` either applies
fully or raises one of the errors defined here without touching the
election state. None of them is retried by the engine; deciding whether
to wait for a phase to open or to give up is left to the caller.
'''

from typing import Any, Optional


class ElectionError(Exception):
    '''An operation was rejected by the rules of the election.'''
    pass


class Unauthorized(ElectionError):
    '''A privileged operation was invoked by someone else than the chairperson.

    :param caller: Principal that invoked the operation.
    :param operation: Name of the rejected operation.
    '''
    def __init__(self, caller: Any, operation: Optional[str] = None):
        self.caller = caller
        self.operation = operation
        message = f'{caller!r} is not the chairperson'
        if operation:
            message += f', cannot {operation}'
        super().__init__(message)


class AlreadyVoted(ElectionError):
    '''The voter has already voted, either directly or by delegating.'''
    def __init__(self, voter: Any):
        self.voter = voter
        super().__init__(f'{voter!r} has already voted')


class AlreadyEnrolled(ElectionError):
    '''The voter has already been given the right to vote.'''
    def __init__(self, voter: Any):
        self.voter = voter
        super().__init__(f'{voter!r} already has the right to vote')


class NotEligible(ElectionError):
    '''The voter has no voting weight (was never given the right to vote).'''
    def __init__(self, voter: Any):
        self.voter = voter
        super().__init__(f'{voter!r} has no right to vote')


class SelfDelegation(ElectionError):
    '''A voter tried to delegate to themselves.'''
    def __init__(self, voter: Any):
        self.voter = voter
        super().__init__(f'{voter!r} cannot delegate to themselves')


class DelegationCycle(ElectionError):
    '''The delegation would lead back to the delegating voter.

    :param voter: The delegating voter.
    :param chain: Principals visited while following the delegation chain.
    '''
    def __init__(self, voter: Any, chain: Optional[list] = None):
        self.voter = voter
        self.chain = chain if chain is not None else []
        message = f'delegation by {voter!r} forms a cycle'
        if self.chain:
            message += ': ' + ' -> '.join(repr(p) for p in [voter] + self.chain)
        super().__init__(message)


class PhaseClosed(ElectionError):
    '''The time window of the phase gating the operation is not open.

    :param phase: Name of the phase (``nomination`` or ``voting``).
    :param now: The time at which the operation was attempted.
    '''
    def __init__(self, phase: str, now: Any):
        self.phase = phase
        self.now = now
        super().__init__(f'{phase} phase is not open at {now}')


class InvalidCandidate(ElectionError):
    '''A candidate ID does not refer to a nominated candidate.

    :param candidate_id: The ID that was found to be invalid.
    :param n_candidates: Number of candidates nominated so far.
    '''
    def __init__(self, candidate_id: Any, n_candidates: int):
        self.candidate_id = candidate_id
        self.n_candidates = n_candidates
        message = f'invalid candidate ID: {candidate_id}'
        if n_candidates:
            message += f', must be between 1 and {n_candidates}'
        else:
            message += ', no candidates nominated'
        super().__init__(message)


class NoWinner(ElectionError):
    '''There is no winning candidate to name.

    Raised when there are no candidates or when no votes were counted yet.
    '''
    def __init__(self, n_candidates: int):
        self.n_candidates = n_candidates
        if n_candidates:
            message = 'no winner: no votes counted yet'
        else:
            message = 'no winner: no candidates nominated'
        super().__init__(message)
