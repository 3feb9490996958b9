'''Delegation chain resolution and weight transfer.

When a voter delegates, their weight does not stop at the voter they named:
the delegation chain is followed to its terminal voter, the first one that
has not delegated themselves. The weight is then credited to exactly one
destination:

-   if the terminal voter has already voted directly, straight to the tally
    of the candidate they voted for,
-   otherwise to the terminal voter's weight, to be carried by their own
    eventual vote or delegation.

A delegation whose chain leads back to the delegating voter is rejected.
Only cycles through the delegating voter are looked for; other chains are
walked to their end, up to a bound given by the number of enrolled voters
so that the walk terminates even on an inconsistent registry.
'''

import logging
from typing import List, Optional, Tuple

from ballotlib.candidate import CandidateRegistry
from ballotlib.errors import DelegationCycle
from ballotlib.voter import Delegated, IdentityRegistry, Principal, VotedDirectly


logger = logging.getLogger(__name__)


class DelegationResolver:
    '''Follows delegation chains and moves delegated weight.

    :param voters: Voter registry to read the chains from and to update.
    :param candidates: Candidate registry to credit the weight to when the
        chain ends at a voter who has already voted.
    '''
    def __init__(self,
                 voters: IdentityRegistry,
                 candidates: CandidateRegistry,
                 ):
        self.voters = voters
        self.candidates = candidates

    def chain(self,
              voter: Principal,
              max_hops: Optional[int] = None,
              ) -> List[Principal]:
        '''Return the principals the voter's delegation chain passes through.

        The voter themselves is not included; the last item is the terminal
        voter. An empty list is returned for voters that have not delegated.

        :param voter: Voter to start at.
        :param max_hops: Maximum number of links to follow, unbounded if None.
        :raises DelegationCycle: If the chain revisits the starting voter or
            is longer than allowed.
        '''
        visited = []
        current = self.voters.get(voter).delegate_to
        while current is not None:
            if current == voter or (
                max_hops is not None and len(visited) >= max_hops
            ):
                raise DelegationCycle(voter, visited + [current])
            visited.append(current)
            current = self.voters.get(current).delegate_to
        return visited

    def resolve(self,
                delegator: Principal,
                target: Principal,
                max_hops: int,
                ) -> Tuple[Principal, List[Principal]]:
        '''Find where a delegation from delegator to target would end up.

        Follows the ``delegate_to`` links from the target, checking every
        voter reached against the delegator.

        :param delegator: The voter about to delegate.
        :param target: The voter named by the delegator.
        :param max_hops: Maximum number of links to follow from the target.
        :returns: The terminal voter and the full list of voters passed
            (starting with the target, ending with the terminal voter).
        :raises DelegationCycle: If the chain reaches the delegator or does
            not end within max_hops links.
        '''
        path = [target]
        current = target
        for _ in range(max_hops):
            following = self.voters.get(current).delegate_to
            if following is None:
                break
            current = following
            path.append(current)
            logger.debug('delegation by %s passes through %s',
                         delegator, current)
            if current == delegator:
                raise DelegationCycle(delegator, path)
        else:
            if self.voters.get(current).delegate_to is not None:
                raise DelegationCycle(delegator, path)
        if current == delegator:
            raise DelegationCycle(delegator, path)
        return current, path

    def transfer(self,
                 delegator: Principal,
                 final_target: Principal,
                 ) -> int:
        '''Mark the delegator as delegated and move their weight.

        The delegator must have been validated and the final target obtained
        from :meth:`resolve` beforehand; this step cannot fail.

        :returns: The weight moved.
        '''
        delegator_rec = self.voters.record(delegator)
        weight = delegator_rec.weight
        target_rec = self.voters.record(final_target)
        delegator_rec.status = Delegated(final_target)
        if isinstance(target_rec.status, VotedDirectly):
            candidate = self.candidates.get(target_rec.status.candidate_id)
            candidate.vote_count += weight
            logger.info('%s delegated %d to %s, counted for %s',
                        delegator, weight, final_target, candidate.name)
        else:
            target_rec.weight += weight
            logger.info('%s delegated %d to %s, now holding %d',
                        delegator, weight, final_target, target_rec.weight)
        return weight
