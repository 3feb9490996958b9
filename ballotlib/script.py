"""Replaying recorded sequences of election operations.

A transcript is a JSON object describing an election and the operations
invoked on it in order::

    {
        "chairperson": "chair",
        "created_at": 0,
        "steps": [
            {"op": "set_nomination_phase", "caller": "chair",
             "start": 0, "duration": 10},
            {"op": "add_candidate", "caller": "chair", "name": "Alice",
             "now": 5},
            {"op": "give_right_to_vote", "caller": "chair", "voter": "v1"},
            {"op": "vote", "caller": "v1", "candidate_id": 1, "now": 15}
        ]
    }

Each step names an operation of :class:`ballotlib.election.Election` and
gives its arguments by name. The time of phase-gated operations is given
per step as ``now``.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from typing import Any, Dict, Iterable, List, Optional, TextIO

from ballotlib.election import Election
from ballotlib.errors import ElectionError


logger = logging.getLogger(__name__)


class ScriptError(Exception):
    """A transcript is malformed."""
    pass


OPERATIONS: Dict[str, List[str]] = {
    'set_nomination_phase': ['start', 'duration'],
    'set_voting_phase': ['start', 'duration'],
    'add_candidate': ['name', 'now'],
    'give_right_to_vote': ['voter'],
    'delegate': ['to', 'now'],
    'vote': ['candidate_id', 'now'],
}


@dataclasses.dataclass
class Step:
    """A single recorded operation."""
    op: str
    caller: Any
    arguments: Dict[str, Any]

    @classmethod
    def from_dict(cls, step_def: Dict[str, Any], index: int = 0) -> Step:
        if not isinstance(step_def, dict):
            raise ScriptError(f'step {index}: object expected, got {step_def!r}')
        params = step_def.copy()
        try:
            op = params.pop('op')
            caller = params.pop('caller')
        except KeyError as e:
            raise ScriptError(f'step {index}: missing {e}') from e
        if op not in OPERATIONS:
            raise ScriptError(
                f'step {index}: unknown operation {op!r}, allowed: '
                + ', '.join(OPERATIONS.keys())
            )
        expected = set(OPERATIONS[op])
        if set(params.keys()) != expected:
            raise ScriptError(
                f'step {index}: {op} takes {sorted(expected)},'
                f' got {sorted(params.keys())}'
            )
        return cls(op, caller, params)


@dataclasses.dataclass
class Transcript:
    """A container for an election setup with its recorded operations."""
    chairperson: Any
    steps: List[Step]
    created_at: Any = 0
    election_name: Optional[str] = None

    def create_election(self) -> Election:
        return Election(self.chairperson, created_at=self.created_at)


@dataclasses.dataclass
class StepResult:
    """Outcome of a replayed step: either a result or an error."""
    index: int
    step: Step
    result: Any = None
    error: Optional[ElectionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse(definition: Dict[str, Any]) -> Transcript:
    """Build a transcript from its JSON-like dictionary form."""
    if not isinstance(definition, dict):
        raise ScriptError(f'transcript must be an object, got {definition!r}')
    if 'chairperson' not in definition:
        raise ScriptError('transcript must name a chairperson')
    steps = definition.get('steps', [])
    if not isinstance(steps, list):
        raise ScriptError(f'steps must be a list, got {steps!r}')
    return Transcript(
        chairperson=definition['chairperson'],
        steps=[Step.from_dict(step, i) for i, step in enumerate(steps)],
        created_at=definition.get('created_at', 0),
        election_name=definition.get('name'),
    )


def load(file: TextIO) -> Transcript:
    """Load a transcript from a JSON file."""
    return loads(file.read())


def loads(text: str) -> Transcript:
    """Load a transcript from a JSON string."""
    try:
        definition = json.loads(text)
    except json.JSONDecodeError as e:
        raise ScriptError(f'invalid transcript JSON: {e}') from e
    return parse(definition)


def apply(election: Election, step: Step) -> Any:
    """Invoke the operation recorded in the step on the election."""
    return getattr(election, step.op)(step.caller, **step.arguments)


def replay(election: Election,
           steps: Iterable[Step],
           strict: bool = False,
           ) -> List[StepResult]:
    """Apply the steps to the election in order.

    :param election: Election to apply the steps to.
    :param steps: Recorded operations.
    :param strict: Whether to stop at the first rejected operation by
        re-raising its error. Otherwise, rejected operations are recorded in
        the results and the replay goes on, as the election is left intact.
    :returns: Outcomes of the steps, in order.
    """
    results = []
    for i, step in enumerate(steps):
        try:
            result = apply(election, step)
        except ElectionError as e:
            if strict:
                raise
            logger.warning('step %d (%s by %s) rejected: %s',
                           i, step.op, step.caller, e)
            results.append(StepResult(i, step, error=e))
        else:
            results.append(StepResult(i, step, result=result))
    return results
