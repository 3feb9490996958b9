"""A commandline tool for replaying recorded election transcripts.

Applies the recorded operations to a fresh election, reports which of them
were rejected and shows the resulting standings and winner.
"""

import argparse
import io
import json
import logging
import sys
import warnings
from typing import List

import ballotlib.persist
import ballotlib.script
from ballotlib.election import Election
from ballotlib.errors import ElectionError, NoWinner
from ballotlib.script import StepResult

argparser = argparse.ArgumentParser(
    description=__doc__,
    formatter_class=argparse.ArgumentDefaultsHelpFormatter,
)
argparser.add_argument(
    '-i', '--input-file',
    type=argparse.FileType('r', encoding='utf8'),
    help='file to load the transcript from',
)
argparser.add_argument(
    '-I', '--use-stdin',
    action='store_true',
    help='load the transcript from standard input',
)
argparser.add_argument(
    '-s', '--strict',
    action='store_true',
    help='stop at the first rejected operation',
)
argparser.add_argument(
    '-d', '--dump-state',
    action='store_true',
    help='print a JSON snapshot of the final election state',
)
argparser.add_argument(
    '-v', '--verbose',
    action='store_true',
    help='show all engine log messages',
)
argparser.add_argument(
    '-q', '--quiet',
    action='store_true',
    help='do not show any engine log messages',
)


def main(input_file: io.TextIOBase,
         use_stdin: bool = False,
         strict: bool = False,
         dump_state: bool = False,
         verbose: bool = False,
         quiet: bool = False,
         ) -> int:
    logging.basicConfig(
        level=(
            logging.DEBUG if verbose
            else (logging.WARNING if quiet else logging.INFO)
        ),
        format='%(levelname)-10s %(message)s'
    )
    if use_stdin:
        input_file = sys.stdin
    transcript = ballotlib.script.load(input_file)
    if not transcript.steps:
        warnings.warn('empty transcript: nothing to replay')
    election = transcript.create_election()
    try:
        results = ballotlib.script.replay(
            election, transcript.steps, strict=strict
        )
    except ElectionError as e:
        print(f'Replay stopped: {e}')
        return 1
    show_results(results)
    print()
    show_standings(election)
    if dump_state:
        print()
        print(json.dumps(ballotlib.persist.to_dict(election), indent=2))
    return 0


def show_results(results: List[StepResult]) -> None:
    """Show the outcome of every replayed step."""
    n_rejected = sum(1 for res in results if not res.ok)
    print(f'Replayed {len(results)} operations, {n_rejected} rejected')
    for res in results:
        outcome = 'ok' if res.ok else f'rejected: {res.error}'
        if res.ok and res.result is not None:
            outcome += f' -> {res.result}'
        print(str(res.index).rjust(4), ' ', res.step.op, res.step.caller,
              outcome)


def show_standings(election: Election) -> None:
    """Show the vote counts of all candidates and the winner."""
    standings = election.standings()
    if not standings:
        print('No candidates nominated')
        return
    n_just_chars = len(max((cand.name for cand, _ in standings), key=len))
    for cand, count in standings:
        print(str(cand.id).rjust(4), ' ', cand.name.ljust(n_just_chars), ' ',
              count)
    try:
        name = election.winner_name()
    except NoWinner as e:
        print(f'Nobody elected ({e})')
        return
    tied = election.leaders()
    if len(tied) > 1:
        print(f'Tie between {len(tied)} candidates, earliest nominated wins')
    print(f'Elected: {name}')


if __name__ == '__main__':
    args = argparser.parse_args()
    if not args.input_file and not args.use_stdin:
        argparser.print_usage()
    else:
        sys.exit(main(**vars(args)))
