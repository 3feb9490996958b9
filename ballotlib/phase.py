'''Time windows gating nomination and voting.

Both windows are specified relative to the creation time of the election.
An operation gated by a phase is permitted strictly inside its window,
i.e. while ``created_at + start < now < created_at + start + duration``.
A phase that has never been set (zero start, zero duration) is never open.

The engine never reads a clock on its own; the current time is always
passed in by the caller. The :class:`Clock` classes here are a convenience
for hosting environments and tests that want to obtain it from somewhere.
'''

import abc
import logging
import time
from numbers import Real
from typing import Any

from ballotlib.persist import simple_serialization


logger = logging.getLogger(__name__)

NOMINATION = 'nomination'
VOTING = 'voting'


class Clock(metaclass=abc.ABCMeta):
    '''An abstract source of the current time.

    The time must never decrease between calls.
    '''
    @abc.abstractmethod
    def now(self) -> Real:
        raise NotImplementedError


class SystemClock(Clock):
    '''Wall clock time in seconds since the epoch.'''
    def now(self) -> float:
        return time.time()


class ManualClock(Clock):
    '''A clock that only moves when told to.

    :param start: The initial time.
    '''
    def __init__(self, start: Real = 0):
        self._now = start

    def now(self) -> Real:
        return self._now

    def advance(self, by: Real) -> Real:
        if by < 0:
            raise ValueError(f'cannot move clock backwards by {by}')
        self._now += by
        return self._now

    def set(self, to: Real) -> Real:
        if to < self._now:
            raise ValueError(f'cannot move clock backwards to {to}')
        self._now = to
        return self._now


def _check_unsigned(value: Any, value_name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(
            f'invalid phase {value_name}: {value!r}, must be an integer >= 0'
        )


@simple_serialization
class Phase:
    '''A time window relative to the creation of the election.

    :param start: Offset of the window start from the creation time.
    :param duration: Length of the window.
    '''
    def __init__(self, start: int = 0, duration: int = 0):
        _check_unsigned(start, 'start')
        _check_unsigned(duration, 'duration')
        self.start = start
        self.duration = duration

    def is_open(self, created_at: Real, now: Real) -> bool:
        opens = created_at + self.start
        return opens < now < opens + self.duration

    def __repr__(self) -> str:
        return f'<Phase({self.start},{self.duration})>'


@simple_serialization
class PhaseController:
    '''Holds the nomination and voting windows of an election.

    Setting a phase overwrites the previous setting; no history is kept and
    the two windows are not checked against each other, so they may overlap
    or come in any order.

    :param created_at: Creation time of the election that both windows are
        relative to.
    :param nomination: Initial nomination window.
    :param voting: Initial voting window.
    '''
    def __init__(self,
                 created_at: Real = 0,
                 nomination: Phase = None,
                 voting: Phase = None,
                 ):
        self.created_at = created_at
        self.nomination = nomination if nomination is not None else Phase()
        self.voting = voting if voting is not None else Phase()

    def set_nomination(self, start: int, duration: int) -> None:
        self.nomination = Phase(start, duration)
        logger.info('nomination phase set to %s', self.nomination)

    def set_voting(self, start: int, duration: int) -> None:
        self.voting = Phase(start, duration)
        logger.info('voting phase set to %s', self.voting)

    def is_nomination_open(self, now: Real) -> bool:
        return self.nomination.is_open(self.created_at, now)

    def is_voting_open(self, now: Real) -> bool:
        return self.voting.is_open(self.created_at, now)

    def get(self, name: str) -> Phase:
        if name == NOMINATION:
            return self.nomination
        elif name == VOTING:
            return self.voting
        else:
            raise ValueError(
                f'unknown phase: {name}, allowed {[NOMINATION, VOTING]}'
            )
