import sys
import os

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import ballotlib.candidate
import ballotlib.errors


def test_sequential_ids():
    registry = ballotlib.candidate.CandidateRegistry()
    ids = [registry.add(name).id for name in ['A', 'B', 'A']]
    assert ids == [1, 2, 3]
    assert len(registry) == 3
    assert [cand.name for cand in registry] == ['A', 'B', 'A']
    assert registry.get(2).name == 'B'


@pytest.mark.parametrize(('cand_id', 'is_valid'), [
    (0, False),
    (1, True),
    (3, True),
    (4, False),
    (-1, False),
    (1.0, False),
    ('1', False),
    (True, False),
    (None, False),
])
def test_check_id(cand_id, is_valid):
    registry = ballotlib.candidate.CandidateRegistry()
    for name in 'ABC':
        registry.add(name)
    assert registry.is_valid_id(cand_id) == is_valid
    if is_valid:
        registry.check_id(cand_id)
    else:
        with pytest.raises(ballotlib.errors.InvalidCandidate):
            registry.check_id(cand_id)


def test_empty_registry():
    registry = ballotlib.candidate.CandidateRegistry()
    with pytest.raises(ballotlib.errors.InvalidCandidate) as excinfo:
        registry.get(1)
    assert excinfo.value.n_candidates == 0
