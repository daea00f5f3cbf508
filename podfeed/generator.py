"""Core functionality for building a podcast RSS feed from local audio files."""

import logging
import os
import sys
import xml.etree.ElementTree as ET
from collections import namedtuple
from datetime import datetime, timezone
from email.utils import format_datetime
from operator import attrgetter
from urllib.parse import quote, urlunsplit

import markdown
import mutagen
from mutagen import MutagenError
from mutagen.id3 import ID3

from podfeed.exceptions import EpisodeFileError, MetadataError, RenderError

logger = logging.getLogger(__name__)

ENCLOSURE_TYPE = "audio/mpeg"

# Channel description byte limit used by podcast directories
DESCRIPTION_BYTE_LIMIT = 4000

# Sub-delimiters allowed unescaped in a URL path
URL_PATH_SAFE = "/$&+,:;=@"

Episode = namedtuple("Episode", ["title", "pub_date", "url", "size"])


class Feed:
    """A channel title and description plus the episodes collected for it."""

    def __init__(self, title, description, episodes=None):
        self.title = title
        self.description = description
        self.episodes = list(episodes or [])

    def add(self, episode):
        self.episodes.append(episode)

    def sort(self):
        """Order episodes oldest first. Episodes with equal dates keep their order."""
        self.episodes.sort(key=attrgetter("pub_date"))


def read_tag_title(stream):
    """Read the track title from an audio file's embedded tags.

    Args:
        stream: Binary file object positioned at the start of the audio file.

    Returns:
        str: The first non-empty title tag.

    Raises:
        MetadataError: The format is unknown, the tags are unreadable or
            there is no title.
    """
    try:
        audio = mutagen.File(stream, easy=True)
    except MutagenError as e:
        raise MetadataError(str(e)) from e

    if audio is None:
        raise MetadataError("unrecognized audio format")

    tags = audio.tags
    if isinstance(tags, ID3):
        # WAVE and AIFF files carry raw ID3 frames even when easy=True
        titles = [text for frame in tags.getall("TIT2") for text in frame.text]
    elif tags is not None:
        titles = tags.get("title")
    else:
        titles = None
    title = next((t for t in titles or [] if t and t.strip()), None)
    if title is None:
        raise MetadataError("no title tag")
    return title


def episode_url(base_url, file_path):
    """Append "/" + file_path to the path of base_url.

    Args:
        base_url (urllib.parse.SplitResult): The parsed base URL. It is never
            modified; a new value is built for every call.
        file_path (str): Path of the audio file as given on the command line.

    Returns:
        str: The public URL of the episode.
    """
    # Quote the raw bytes so paths that are not valid UTF-8 still encode
    path = base_url.path + "/" + quote(os.fsencode(file_path), safe=URL_PATH_SAFE)
    return urlunsplit(base_url._replace(path=path))


def display_path(file_path):
    """Return file_path as printable text, replacing bytes that are not valid UTF-8."""
    return os.fsencode(file_path).decode("utf-8", "replace")


def format_pub_date(date):
    """Format a datetime as RFC 1123 with a numeric zone, e.g. 'Mon, 02 Jan 2006 15:04:05 -0700'."""
    return format_datetime(date)


def format_description(description):
    """Convert a Markdown description to HTML.

    Args:
        description (str): Description in Markdown format.

    Returns:
        str: Description in HTML, cut to DESCRIPTION_BYTE_LIMIT bytes.
    """
    html_description = markdown.markdown(description)

    encoded = html_description.encode("utf-8")
    if len(encoded) > DESCRIPTION_BYTE_LIMIT:
        # Drop any multi-byte character split by the cut
        html_description = encoded[:DESCRIPTION_BYTE_LIMIT].decode("utf-8", "ignore")

    return html_description


def collect_episode(file_path, base_url, strict_tags=False):
    """Build an Episode from one audio file.

    Args:
        file_path (str): Path of the audio file.
        base_url (urllib.parse.SplitResult): Parsed base URL of the feed.
        strict_tags (bool): Fail instead of using the file path as the title
            when the tags cannot be read.

    Returns:
        Episode: The episode record.

    Raises:
        EpisodeFileError: The file cannot be stat'ed or opened.
        MetadataError: The tags cannot be read and strict_tags is set.
    """
    logger.info(f"Processing episode {file_path}...")

    try:
        stat = os.stat(file_path)
    except OSError as e:
        raise EpisodeFileError(file_path, e.strerror or str(e)) from e

    try:
        audio_file = open(file_path, "rb")
    except OSError as e:
        raise EpisodeFileError(file_path, e.strerror or str(e)) from e

    with audio_file:
        try:
            title = read_tag_title(audio_file)
        except MetadataError as e:
            name = display_path(file_path)
            if strict_tags:
                raise MetadataError(f"{name}: Error loading tags: {e}") from e
            logger.warning(
                f"{name}: Error loading tags: {e}.  Falling back to filename for title"
            )
            title = name

    pub_date = datetime.fromtimestamp(stat.st_mtime, timezone.utc).astimezone()

    return Episode(
        title=title,
        pub_date=pub_date,
        url=episode_url(base_url, file_path),
        size=stat.st_size,
    )


def collect_episodes(file_paths, base_url, strict_tags=False):
    """Build episodes for every file, in input order. The first failure aborts."""
    return [collect_episode(path, base_url, strict_tags) for path in file_paths]


def generate_feed(title, description, base_url, file_paths, strict_tags=False):
    feed = Feed(title, description)
    for episode in collect_episodes(file_paths, base_url, strict_tags):
        feed.add(episode)
    return feed


def build_rss(feed):
    """Sort the feed's episodes and build the RSS element tree.

    Args:
        feed (Feed): The feed to render.

    Returns:
        xml.etree.ElementTree.Element: The <rss> root element.
    """
    feed.sort()

    rss = ET.Element("rss", version="2.0")
    channel = ET.SubElement(rss, "channel")
    ET.SubElement(channel, "title").text = feed.title
    ET.SubElement(channel, "description").text = feed.description

    for episode in feed.episodes:
        item = ET.SubElement(channel, "item")
        ET.SubElement(item, "title").text = episode.title
        ET.SubElement(item, "pubDate").text = format_pub_date(episode.pub_date)
        ET.SubElement(
            item,
            "enclosure",
            url=episode.url,
            length=str(episode.size),
            type=ENCLOSURE_TYPE,
        )
        ET.SubElement(item, "guid", isPermaLink="false").text = episode.url

    return rss


def render_rss(feed):
    """Render the feed as a UTF-8 encoded RSS 2.0 document.

    Raises:
        RenderError: A field value cannot be serialized.
    """
    try:
        rss = build_rss(feed)
        ET.indent(rss, space="  ")
        return ET.tostring(rss, encoding="UTF-8", xml_declaration=True) + b"\n"
    except (TypeError, ValueError) as e:
        raise RenderError(f"cannot render feed: {e}") from e


def write_rss(feed, output_file_path="-"):
    """Render the feed and write it out.

    The document is rendered completely before anything is written.

    Args:
        feed (Feed): The feed to write.
        output_file_path (str): Destination path, or "-" for standard output.

    Raises:
        RenderError: The feed cannot be rendered or written.
    """
    document = render_rss(feed)

    try:
        if output_file_path == "-":
            sys.stdout.buffer.write(document)
            sys.stdout.buffer.flush()
        else:
            with open(output_file_path, "wb") as file:
                file.write(document)
    except OSError as e:
        raise RenderError(f"cannot write feed to {output_file_path}: {e}") from e
