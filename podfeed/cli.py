"""Command-line interface for podfeed."""

import argparse
import logging
import sys
from urllib.parse import urlsplit

from podfeed import __version__
from podfeed.config import read_config
from podfeed.exceptions import ConfigError, PodfeedError
from podfeed.generator import format_description, generate_feed, write_rss


def parse_base_url(text):
    """Parse the feed's base URL.

    Args:
        text (str): The base URL from the command line.

    Returns:
        urllib.parse.SplitResult: The parsed URL.

    Raises:
        ConfigError: The URL cannot be parsed or has no scheme or host.
    """
    try:
        base_url = urlsplit(text)
    except ValueError as e:
        raise ConfigError(f"Invalid base URL '{text}': {e}") from e

    if not (base_url.scheme and base_url.netloc):
        raise ConfigError(f"Invalid base URL '{text}': missing scheme or host")

    return base_url


def build_parser():
    parser = argparse.ArgumentParser(
        prog="podfeed",
        description="Generate a podcast RSS feed from local audio files.",
    )

    parser.add_argument("title", help="Feed title")
    parser.add_argument("description", help="Feed description")
    parser.add_argument("base_url", help="URL the audio files are served under")
    parser.add_argument("files", nargs="+", help="Audio files to list as episodes")

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML file with default settings",
    )
    parser.add_argument(
        "--output-file",
        type=str,
        default=None,
        help="Output XML file (default: standard output)",
    )
    parser.add_argument(
        "--strict-tags",
        action="store_true",
        default=None,
        help="Fail when a file's tags cannot be read instead of using its path as the title",
    )
    parser.add_argument(
        "--markdown",
        action="store_true",
        default=None,
        help="Render the feed description from Markdown to HTML",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log each episode as it is processed",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"podfeed version {__version__}",
    )

    return parser


def main():
    """Entry point for the podfeed command."""
    parser = build_parser()

    # Parse arguments from the command line
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        base_url = parse_base_url(args.base_url)
        config = read_config(args.config)

        # Command-line flags take precedence over the config file
        for key in ("strict_tags", "markdown", "output_file"):
            value = getattr(args, key)
            if value is not None:
                config[key] = value

        description = args.description
        if config["markdown"]:
            description = format_description(description)

        feed = generate_feed(
            args.title,
            description,
            base_url,
            args.files,
            strict_tags=config["strict_tags"],
        )
        write_rss(feed, config["output_file"])
    except PodfeedError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
