"""Emoji Kitchen index - command line entry point."""
import argparse
import asyncio
import json
import os
import sys

from pipeline import MetadataManager, run_local_pipeline
from emoji_kitchen.history import MashupHistory
from emoji_kitchen.kitchen import EmojiKitchen
from emoji_kitchen.utils import (
    validate_config,
    ConfigError,
    AcquisitionError,
    CompactIndexError,
    setup_logging,
    get_logger,
)

logger = get_logger(__name__)

MODES = ['fetch', 'refresh', 'status', 'list', 'combos', 'mix', 'random', 'pairs', 'history', 'local']


def report_progress(status: str) -> None:
    logger.info(f"⏳ {status}")


def ensure_metadata(config: dict) -> None:
    manager = MetadataManager(config)
    asyncio.run(manager.ensure_metadata_exists(on_progress=report_progress))


def load_kitchen(config: dict) -> EmojiKitchen:
    """Acquire metadata and load the index, rebuilding a corrupt compact file once."""
    manager = MetadataManager(config)
    asyncio.run(manager.ensure_metadata_exists(on_progress=report_progress))
    kitchen = EmojiKitchen.from_config(config)
    try:
        kitchen.loader.get_index()
    except CompactIndexError as e:
        logger.warning(f"{e}; rebuilding it from the raw metadata")
        manager.discard_compact()
        asyncio.run(manager.ensure_metadata_exists(on_progress=report_progress))
        kitchen.reload()
    return kitchen


def run_fetch(config: dict, args) -> int:
    ensure_metadata(config)
    print("Metadata ready")
    return 0


def run_refresh(config: dict, args) -> int:
    manager = MetadataManager(config)
    asyncio.run(manager.refresh_metadata(on_progress=report_progress))
    print("✅ Emoji metadata refreshed!")
    return 0


def run_status(config: dict, args) -> int:
    print(json.dumps(MetadataManager(config).status(), indent=2))
    return 0


def run_list(config: dict, args) -> int:
    for item in load_kitchen(config).list_base_emojis():
        print(f"{item['emoji']}\t{item['name']}")
    return 0


def run_combos(config: dict, args) -> int:
    if len(args.emojis) != 1:
        logger.error("combos mode takes exactly one emoji")
        return 2
    for item in load_kitchen(config).list_combinations(args.emojis[0]):
        print(f"{item['emoji']}\t{item['name']}")
    return 0


def _print_mashup(config: dict, kitchen: EmojiKitchen, emoji1: str, emoji2: str, record: bool) -> int:
    result = kitchen.resolve_pair(emoji1, emoji2)
    if result is None:
        print(f"No mashup available for {emoji1} + {emoji2}. Try different emojis.")
        return 1
    print(f"{emoji1} + {emoji2}\t{result['url']}")
    if record:
        MashupHistory.from_config(config).add(emoji1, emoji2, result['url'])
    return 0


def run_mix(config: dict, args) -> int:
    if len(args.emojis) != 2:
        logger.error("mix mode takes exactly two emojis")
        return 2
    kitchen = load_kitchen(config)
    return _print_mashup(config, kitchen, args.emojis[0], args.emojis[1], not args.no_history)


def run_random(config: dict, args) -> int:
    kitchen = load_kitchen(config)
    pair = kitchen.random_pair()
    if pair is None:
        print("No combinations available")
        return 1
    return _print_mashup(config, kitchen, pair[0], pair[1], not args.no_history)


def run_pairs(config: dict, args) -> int:
    for emoji1, emoji2 in load_kitchen(config).list_all_pairs():
        print(f"{emoji1}+{emoji2}")
    return 0


def run_history(config: dict, args) -> int:
    history = MashupHistory.from_config(config)
    if args.clear:
        history.clear()
        print("History cleared")
        return 0
    for item in history.get():
        print(f"{item.timestamp}\t{item.left_emoji} + {item.right_emoji}\t{item.mashup_url}")
    return 0


def run_local(config: dict, args) -> int:
    summary = run_local_pipeline(config, args.output_dir)
    print(json.dumps(summary, indent=2, ensure_ascii=False))
    return 0


HANDLERS = {
    'fetch': run_fetch,
    'refresh': run_refresh,
    'status': run_status,
    'list': run_list,
    'combos': run_combos,
    'mix': run_mix,
    'random': run_random,
    'pairs': run_pairs,
    'history': run_history,
    'local': run_local,
}


def main():
    """Entry point with mode selection."""
    parser = argparse.ArgumentParser(description='Emoji Kitchen mashup lookup')
    parser.add_argument('mode', nargs='?', default='fetch', choices=MODES,
                        help='What to do. Default: fetch (download and compact metadata)')
    parser.add_argument('emojis', nargs='*', help='Emoji arguments for combos/mix modes')
    parser.add_argument('--data-dir', help='Override the metadata directory')
    parser.add_argument('--no-history', action='store_true', help='Do not record mix/random results')
    parser.add_argument('--clear', action='store_true', help='Clear history (history mode)')
    parser.add_argument('--output-dir', help='Scratch directory for local mode')

    args = parser.parse_args()
    setup_logging(level=os.getenv('LOG_LEVEL', 'INFO'), structured=False, stream=sys.stderr)

    try:
        config = validate_config()

        # Override with CLI args if provided
        if args.data_dir:
            config['data_dir'] = os.path.expanduser(args.data_dir)

        logger.debug(f"Running {args.mode} mode")
        exit_code = HANDLERS[args.mode](config, args)

    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)
    except AcquisitionError as e:
        logger.error(f"Could not prepare emoji metadata: {e}")
        sys.exit(1)
    except CompactIndexError as e:
        logger.error(f"Emoji index unavailable: {e}. Run 'refresh' to rebuild it.")
        sys.exit(1)
    except Exception as e:
        logger.error(f"{args.mode} failed: {e}")
        sys.exit(1)

    if exit_code:
        sys.exit(exit_code)


if __name__ == '__main__':
    main()
