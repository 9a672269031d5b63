#!/usr/bin/env python3

import argparse
import json
import logging
from collections import Counter
from pathlib import Path
from sys import exit
from time import time

from config_loader import DEFAULT_CONFIG, configure_logging, load_config, select_run_config
from extraction_processing import extract_and_concatenate
from summarize import Summarizer
from warc_errors import WarcBuddyError


def run(archive_path, config, summarize=False):
    """
    Extract one archive file, optionally summarizing the result.

    :param archive_path: path to a .warc or .warc.gz file
    :param config: the selected run-mode config
    :param summarize: send the corpus to the summarization service
    :return: the corpus, or the summary serialised as JSON
    """
    stats = Counter()
    with open(archive_path, "rb") as stream:
        corpus = extract_and_concatenate(stream, stats)
    logging.info(f"Appended {stats['appended']} pages from {archive_path}")

    if not summarize:
        return corpus

    result = Summarizer.from_config(config).summarize(corpus)
    return json.dumps(result, indent=2, ensure_ascii=False)


def run_cli():
    parser = argparse.ArgumentParser(description="Extract a deduplicated text corpus from a web archive")
    parser.add_argument("archive", help="Path to a .warc or .warc.gz file")
    parser.add_argument('--config', default=str(DEFAULT_CONFIG), type=str)
    parser.add_argument(
        "--run_mode",
        choices=["dev", "prod"],
        default="dev",
        help="Specify the run mode: 'dev' or 'prod'"
    )
    parser.add_argument("--summarize", action="store_true", help="Summarize the corpus instead of printing it")
    parser.add_argument("--output", default=None, help="Write the result to this file instead of stdout")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    try:
        config = select_run_config(load_config(args.config), args.run_mode, args.config)
    except (OSError, KeyError) as e:
        print(f"Cannot load configuration: {e}")
        exit(1)

    configure_logging(config['log_dir'], "warcbuddy.log", args.debug)
    logging.info(f"Running in {args.run_mode} mode with config: {config}")

    archive_path = Path(args.archive)
    if not archive_path.exists():
        logging.error(f"Archive not found: {archive_path}")
        exit(1)

    start_time = time()
    try:
        output = run(archive_path, config, args.summarize)
    except WarcBuddyError as e:
        logging.error(f"Failed to process {archive_path}: {e}")
        exit(1)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output)
        logging.info(f"Wrote result to {args.output}")
    else:
        print(output)

    duration = time() - start_time
    logging.info(f"Script completed in {duration:.2f} seconds")


def main():
    try:
        run_cli()
    except Exception as e:
        logging.exception(f"Unhandled exception: {e}")
        exit(1)


if __name__ == "__main__":
    main()
