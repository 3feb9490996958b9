import sys
import os

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import ballotlib.election
import ballotlib.errors
from ballotlib.election import Election


CHAIR = 'chair'
CREATED = 100
NOMINATION_TIME = 120
VOTING_TIME = 200


def make_election(candidates=('Alice', 'Bob'), voters=()):
    election = Election(CHAIR, created_at=CREATED)
    election.set_nomination_phase(CHAIR, 0, 50)
    election.set_voting_phase(CHAIR, 50, 100)
    for name in candidates:
        election.add_candidate(CHAIR, name, NOMINATION_TIME)
    for voter in voters:
        election.give_right_to_vote(CHAIR, voter)
    return election


def snapshot(election):
    return election.to_dict()


def test_initial_state():
    election = Election(CHAIR, created_at=CREATED)
    assert election.chairperson == CHAIR
    assert election.created_at == CREATED
    assert election.voter_count == 1
    assert election.candidate_count == 0
    assert election.voter(CHAIR).weight == 1
    assert not election.voter(CHAIR).has_voted
    assert election.voter('nobody').weight == 0
    assert election.winning_candidate() == 0
    assert not election.is_nomination_open(CREATED + 1)
    assert not election.is_voting_open(CREATED + 1)


@pytest.mark.parametrize(('operation', 'args'), [
    ('set_nomination_phase', (0, 10)),
    ('set_voting_phase', (0, 10)),
    ('add_candidate', ('Mallory', NOMINATION_TIME)),
    ('give_right_to_vote', ('v1',)),
])
def test_unauthorized(operation, args):
    election = make_election(voters=['v1'])
    before = snapshot(election)
    with pytest.raises(ballotlib.errors.Unauthorized):
        getattr(election, operation)('v1', *args)
    assert snapshot(election) == before


def test_phase_setters_overwrite():
    election = make_election()
    election.set_nomination_phase(CHAIR, 500, 10)
    election.set_voting_phase(CHAIR, 0, 1000)
    assert election.phase('nomination').start == 500
    assert election.phase('voting').duration == 1000
    assert not election.is_nomination_open(NOMINATION_TIME)
    assert election.is_voting_open(NOMINATION_TIME)


def test_add_candidate_sequential_ids():
    election = make_election(candidates=[])
    assert election.add_candidate(CHAIR, 'Alice', NOMINATION_TIME) == 1
    assert election.add_candidate(CHAIR, 'Bob', NOMINATION_TIME) == 2
    assert election.add_candidate(CHAIR, 'Alice', NOMINATION_TIME) == 3
    assert election.candidate_count == 3
    assert election.candidate(3).name == 'Alice'
    assert election.candidate(3).vote_count == 0


@pytest.mark.parametrize('now', [CREATED, CREATED + 50, CREATED - 10, VOTING_TIME])
def test_add_candidate_outside_nomination(now):
    election = make_election(candidates=[])
    with pytest.raises(ballotlib.errors.PhaseClosed):
        election.add_candidate(CHAIR, 'Alice', now)
    assert election.candidate_count == 0


def test_give_right_to_vote():
    election = make_election()
    election.give_right_to_vote(CHAIR, 'v1')
    assert election.voter('v1').weight == 1
    assert election.voter_count == 2
    with pytest.raises(ballotlib.errors.AlreadyEnrolled):
        election.give_right_to_vote(CHAIR, 'v1')
    assert election.voter('v1').weight == 1
    assert election.voter_count == 2


def test_give_right_to_chairperson():
    election = make_election()
    with pytest.raises(ballotlib.errors.AlreadyEnrolled):
        election.give_right_to_vote(CHAIR, CHAIR)


def test_give_right_after_voting():
    election = make_election()
    election.vote(CHAIR, 1, VOTING_TIME)
    with pytest.raises(ballotlib.errors.AlreadyVoted):
        election.give_right_to_vote(CHAIR, CHAIR)


def test_vote():
    election = make_election(voters=['v1', 'v2'])
    election.vote('v1', 2, VOTING_TIME)
    voter = election.voter('v1')
    assert voter.has_voted
    assert voter.voted_candidate_id == 2
    assert voter.delegate_to is None
    assert election.directly_voted('v1')
    assert not election.delegated('v1')
    assert election.candidate(2).vote_count == 1
    with pytest.raises(ballotlib.errors.AlreadyVoted):
        election.vote('v1', 1, VOTING_TIME)
    assert election.candidate(1).vote_count == 0


def test_vote_not_eligible():
    election = make_election()
    with pytest.raises(ballotlib.errors.NotEligible):
        election.vote('stranger', 1, VOTING_TIME)
    assert 'stranger' not in election.voters


@pytest.mark.parametrize('candidate_id', [0, 3, 100, -1])
@pytest.mark.parametrize('now', [VOTING_TIME, NOMINATION_TIME, 10000])
def test_vote_invalid_candidate(candidate_id, now):
    election = make_election(voters=['v1'])
    with pytest.raises(ballotlib.errors.InvalidCandidate):
        election.vote('v1', candidate_id, now)
    assert not election.voter('v1').has_voted


@pytest.mark.parametrize('now', [NOMINATION_TIME, CREATED + 50, CREATED + 150, 10000])
def test_vote_outside_voting(now):
    election = make_election(voters=['v1'])
    before = snapshot(election)
    with pytest.raises(ballotlib.errors.PhaseClosed):
        election.vote('v1', 1, now)
    assert snapshot(election) == before


def test_delegate():
    election = make_election(voters=['v1', 'v2'])
    assert election.delegate('v1', 'v2', VOTING_TIME) == 'v2'
    assert election.voter('v1').has_voted
    assert election.voter('v1').delegate_to == 'v2'
    assert election.delegated('v1')
    assert not election.directly_voted('v1')
    assert election.voter('v2').weight == 2
    with pytest.raises(ballotlib.errors.AlreadyVoted):
        election.delegate('v1', CHAIR, VOTING_TIME)
    with pytest.raises(ballotlib.errors.AlreadyVoted):
        election.vote('v1', 1, VOTING_TIME)


def test_delegate_to_self():
    election = make_election(voters=['v1'])
    with pytest.raises(ballotlib.errors.SelfDelegation):
        election.delegate('v1', 'v1', VOTING_TIME)
    assert not election.voter('v1').has_voted


def test_delegate_not_eligible():
    election = make_election(voters=['v1'])
    with pytest.raises(ballotlib.errors.NotEligible):
        election.delegate('stranger', 'v1', VOTING_TIME)
    assert election.voter('v1').weight == 1


def test_delegate_after_voting():
    election = make_election(voters=['v1', 'v2'])
    election.vote('v1', 1, VOTING_TIME)
    before = snapshot(election)
    with pytest.raises(ballotlib.errors.AlreadyVoted):
        election.delegate('v1', 'v2', VOTING_TIME)
    assert snapshot(election) == before


def test_delegate_outside_voting():
    election = make_election(voters=['v1', 'v2'])
    before = snapshot(election)
    with pytest.raises(ballotlib.errors.PhaseClosed):
        election.delegate('v1', 'v2', NOMINATION_TIME)
    assert snapshot(election) == before


def test_delegate_to_unenrolled():
    election = make_election(voters=['v1', 'v2'])
    election.delegate('v1', 'stranger', VOTING_TIME)
    assert election.voter('stranger').weight == 1
    assert not election.voter('stranger').is_enrolled
    assert election.voter_count == 3
    before = snapshot(election)
    with pytest.raises(ballotlib.errors.NotEligible):
        election.vote('stranger', 1, VOTING_TIME)
    with pytest.raises(ballotlib.errors.NotEligible):
        election.delegate('stranger', 'v2', VOTING_TIME)
    with pytest.raises(ballotlib.errors.AlreadyEnrolled):
        election.give_right_to_vote(CHAIR, 'stranger')
    assert snapshot(election) == before
    assert election.vote_totals() == {1: 0, 2: 0}


def test_chain_through_unenrolled():
    election = make_election(voters=['a'])
    election.delegate('a', 'x', VOTING_TIME)
    for delegator, target in [('x', 'y'), ('y', 'z'), ('z', 'w')]:
        with pytest.raises(ballotlib.errors.NotEligible):
            election.delegate(delegator, target, VOTING_TIME)
    assert election.delegation_chain('a') == ['x']
    assert election.delegate(CHAIR, 'x', VOTING_TIME) == 'x'
    assert election.voter('x').weight == 2


def test_chain_as_long_as_electorate():
    voters = [f'v{i}' for i in range(8)]
    election = make_election(voters=voters)
    # each voter delegates to the next one before that one delegates onwards
    for delegator, target in zip(voters, voters[1:]):
        election.delegate(delegator, target, VOTING_TIME)
    assert election.delegation_chain('v0') == voters[1:]
    election.delegate(CHAIR, 'v0', VOTING_TIME)
    assert election.voter('v7').weight == 9
    assert election.delegation_chain(CHAIR) == ['v7']
    election.vote('v7', 1, VOTING_TIME)
    assert election.candidate(1).vote_count == 9


def test_delegate_to_voted():
    election = make_election(voters=['v1', 'v2'])
    election.vote('v2', 2, VOTING_TIME)
    election.delegate('v1', 'v2', VOTING_TIME)
    assert election.candidate(2).vote_count == 2
    assert election.voter('v2').weight == 1


def test_two_cycle():
    election = make_election(voters=['a', 'b'])
    election.delegate('b', 'a', VOTING_TIME)
    before = snapshot(election)
    with pytest.raises(ballotlib.errors.DelegationCycle):
        election.delegate('a', 'b', VOTING_TIME)
    assert snapshot(election) == before
    assert not election.voter('a').has_voted
    assert election.voter('b').delegate_to == 'a'


def test_long_cycle():
    election = make_election(voters=['a', 'b', 'c', 'd'])
    election.delegate('b', 'c', VOTING_TIME)
    election.delegate('c', 'd', VOTING_TIME)
    election.delegate('d', 'a', VOTING_TIME)
    assert election.delegation_chain('b') == ['c', 'd', 'a']
    assert election.voter('a').weight == 4
    before = snapshot(election)
    with pytest.raises(ballotlib.errors.DelegationCycle):
        election.delegate('a', 'b', VOTING_TIME)
    assert snapshot(election) == before


def test_chain_scenario():
    election = make_election(voters=['v1', 'v2', 'v3', 'v4'])
    election.delegate('v2', 'v3', VOTING_TIME)
    election.delegate('v3', 'v4', VOTING_TIME)
    assert election.voter('v4').weight == 3
    election.vote('v4', 2, VOTING_TIME)
    election.vote('v1', 1, VOTING_TIME)
    assert election.candidate(2).vote_count == 3
    assert election.candidate(1).vote_count == 1
    assert election.winning_candidate() == 2
    assert election.winner_name() == 'Bob'


def test_delegation_goes_to_chain_end():
    election = make_election(voters=['a1', 'a2', 'a3'])
    election.delegate('a2', 'a3', VOTING_TIME)
    assert election.delegate('a1', 'a2', VOTING_TIME) == 'a3'
    assert election.voter('a1').delegate_to == 'a3'
    assert election.voter('a2').weight == 1
    assert election.voter('a3').weight == 3


def test_vote_count_conservation():
    voters = [f'v{i}' for i in range(10)]
    election = make_election(candidates=['A', 'B', 'C'], voters=voters)
    election.delegate('v0', 'v1', VOTING_TIME)
    election.vote('v1', 1, VOTING_TIME)
    election.delegate('v2', 'v1', VOTING_TIME)
    election.delegate('v3', 'v4', VOTING_TIME)
    election.delegate('v4', 'v5', VOTING_TIME)
    election.vote('v5', 3, VOTING_TIME)
    election.vote('v6', 2, VOTING_TIME)
    election.delegate('v7', 'v8', VOTING_TIME)
    # v8 and v9 never vote, v7's weight stays parked at v8
    counted = sum(election.vote_totals().values())
    assert counted == 7
    assert counted <= election.voter_count
    assert election.vote_totals() == {1: 3, 2: 1, 3: 3}
    assert election.winning_candidate() == 1


def test_winner_name_without_candidates():
    election = Election(CHAIR)
    assert election.winning_candidate() == 0
    with pytest.raises(ballotlib.errors.NoWinner):
        election.winner_name()


def test_winner_name_without_votes():
    election = make_election()
    with pytest.raises(ballotlib.errors.NoWinner):
        election.winner_name()


def test_serialized_election():
    election = ballotlib.election.SerializedElection(make_election(voters=['v1']))
    election.vote('v1', 1, VOTING_TIME)
    assert election.winning_candidate() == 1
    assert election.voter_count == 2
    assert election.to_dict()['candidates'][0]['vote_count'] == 1
