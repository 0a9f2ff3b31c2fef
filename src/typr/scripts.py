import argparse
import logging
import pathlib
import pprint

import msgspec
import trio

from .analysis import analyze
from .app import TypingTest, store_and_export
from .capture.recorded import Recording, load_recording, replay
from .capture.wordsource import FixedWords
from .commontypes import InvalidSessionRecord
from .db import make_db
from .durations import format_millis
from .session.export import load_record
from .settings import Settings

logger = logging.getLogger(__name__)


def print_analysis(path: pathlib.Path, top: int):
    try:
        report = analyze(load_record(path))
    except InvalidSessionRecord as exc:
        logger.error("%s: %s", path, exc)
        return 1
    raw = msgspec.to_builtins(msgspec.structs.replace(report, digraphs=report.digraphs[:top]))
    pprint.pprint(raw, sort_dicts=False)
    return 0


analyze_parser = argparse.ArgumentParser(prog="typr-analyze")
analyze_parser.add_argument("session", type=pathlib.Path)
analyze_parser.add_argument("--top", type=int, default=10, help="how many of the slowest digraphs to show")


def analyze_cli():
    logging.basicConfig(level=logging.INFO)
    args = analyze_parser.parse_args()
    return print_analysis(args.session, args.top)


sessions_parser = argparse.ArgumentParser(prog="typr-sessions")
sessions_parser.add_argument("settings", type=pathlib.Path)
sessions_parser.add_argument("--limit", type=int, default=None)


def list_sessions_cli():
    logging.basicConfig(level=logging.INFO)
    args = sessions_parser.parse_args()
    settings = Settings.load(args.settings)
    store = make_db(settings.db_path)
    for listing in store.list_for_owner(settings.owner_id, limit=args.limit):
        mode = listing.mode.value if listing.mode is not None else "?"
        print(
            f"{listing.session_id}  {listing.created_at:%Y-%m-%d %H:%M}  {mode}/{listing.mode_value}  "
            f"{format_millis(listing.session_duration_ms)}  {listing.accuracy_percent}%  {listing.productive_cpm} cpm"
        )
    return 0


replay_parser = argparse.ArgumentParser(prog="typr-replay")
replay_parser.add_argument("settings", type=pathlib.Path)
replay_parser.add_argument("recording", type=pathlib.Path)
replay_parser.add_argument("--no-store", action="store_true", help="only write the export file")


async def replay_session(settings: Settings, recording: Recording, store):
    typing_test = TypingTest(
        settings,
        word_source=FixedWords.from_text(recording.text),
        handoff=store_and_export(store, settings.export_path),
    )
    record, handoff = await typing_test.run(replay(recording.signals))
    try:
        await handoff.wait()
    except Exception:
        logger.exception("session %s was captured but could not be saved", record.session_id)
        return 1
    print(f"{record.session_id}: {record.accuracy_percent}% accuracy, {record.productive_cpm} cpm")
    return 0


def replay_cli():
    logging.basicConfig(level=logging.DEBUG)
    args = replay_parser.parse_args()
    settings = Settings.load(args.settings)
    store = None if args.no_store else make_db(settings.db_path)
    return trio.run(replay_session, settings, load_recording(args.recording), store)
