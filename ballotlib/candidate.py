'''Candidates and their registry.

Candidates are nominated by the chairperson during the nomination phase and
get sequential IDs starting at 1, which are never reused. Names are not
deduplicated: two candidates may share a name and still be told apart by
their IDs. Nothing is ever removed from the registry.
'''

from typing import Any, Dict, Iterator, List

from ballotlib.errors import InvalidCandidate
from ballotlib.persist import simple_serialization


@simple_serialization
class Candidate:
    '''A nominated candidate.

    :param id: Sequential ID assigned at nomination, starting at 1.
    :param name: Name of the candidate, in any customary text format.
    :param vote_count: Weight of votes received so far. It never decreases.
    '''
    def __init__(self, id: int, name: str, vote_count: int = 0):
        self.id = id
        self.name = name
        self.vote_count = vote_count

    def __repr__(self) -> str:
        return f'<Candidate({self.id},{self.name},{self.vote_count})>'


class CandidateRegistry:
    '''Append-only, ID-indexed collection of candidates.

    Candidate with ID ``i`` is stored at position ``i - 1``.
    '''
    def __init__(self):
        self._candidates: List[Candidate] = []

    def add(self, name: str) -> Candidate:
        '''Nominate a new candidate under the next free ID.'''
        candidate = Candidate(len(self._candidates) + 1, name)
        self._candidates.append(candidate)
        return candidate

    def is_valid_id(self, candidate_id: Any) -> bool:
        return (
            isinstance(candidate_id, int)
            and not isinstance(candidate_id, bool)
            and 1 <= candidate_id <= len(self._candidates)
        )

    def check_id(self, candidate_id: Any) -> None:
        '''Check that the ID refers to a nominated candidate.

        :raises InvalidCandidate: If it does not (0 and IDs beyond the number
            of candidates are always invalid).
        '''
        if not self.is_valid_id(candidate_id):
            raise InvalidCandidate(candidate_id, len(self._candidates))

    def get(self, candidate_id: int) -> Candidate:
        '''Return the candidate with the given ID.

        :raises InvalidCandidate: If there is no such candidate.
        '''
        self.check_id(candidate_id)
        return self._candidates[candidate_id - 1]

    def __len__(self) -> int:
        return len(self._candidates)

    def __iter__(self) -> Iterator[Candidate]:
        return iter(self._candidates)

    def to_dict(self) -> List[Dict[str, Any]]:
        return [cand.to_dict() for cand in self._candidates]
