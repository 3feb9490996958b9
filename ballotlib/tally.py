'''Determining the leading candidate from the accumulated vote counts.

Ties are broken in favour of the candidate nominated first (lowest ID).
'''

import logging
import operator
from typing import Dict, List, Tuple

from ballotlib.candidate import Candidate, CandidateRegistry
from ballotlib.errors import NoWinner


logger = logging.getLogger(__name__)


def winning_candidate(candidates: CandidateRegistry) -> int:
    '''Return the ID of the candidate with the most votes.

    Only a strictly greater count takes over the lead, so of several
    candidates tied for the most votes, the first nominated wins.

    :param candidates: Candidates to scan.
    :returns: ID of the winner; 0 if there are no candidates or no votes
        were counted at all.
    '''
    winning_count = 0
    winning_id = 0
    for cand in candidates:
        if cand.vote_count > winning_count:
            winning_count = cand.vote_count
            winning_id = cand.id
    logger.debug('leading candidate %d with %d votes', winning_id, winning_count)
    return winning_id


def winner_name(candidates: CandidateRegistry) -> str:
    '''Return the name of the winning candidate.

    :raises NoWinner: If :func:`winning_candidate` finds no winner.
    '''
    winner_id = winning_candidate(candidates)
    if winner_id == 0:
        raise NoWinner(len(candidates))
    return candidates.get(winner_id).name


def leaders(candidates: CandidateRegistry) -> List[Candidate]:
    '''Return all candidates sharing the highest nonzero vote count.

    More than one item means that the winner was decided by the tiebreak.
    '''
    counts = [cand.vote_count for cand in candidates]
    if not counts or max(counts) == 0:
        return []
    top = max(counts)
    return [cand for cand in candidates if cand.vote_count == top]


def standings(candidates: CandidateRegistry) -> List[Tuple[Candidate, int]]:
    '''Return candidates with their vote counts, most votes first.

    Candidates with equal counts keep their nomination order.
    '''
    return sorted(
        ((cand, cand.vote_count) for cand in candidates),
        key=operator.itemgetter(1),
        reverse=True,
    )


def vote_totals(candidates: CandidateRegistry) -> Dict[int, int]:
    return {cand.id: cand.vote_count for cand in candidates}
