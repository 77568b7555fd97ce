"""
Gradle dependency tree parser.

Reads the textual tree printed by ``gradle dependencies`` and recovers a flat,
deduplicated list of Maven coordinates in first-seen order.

https://docs.gradle.org/current/userguide/viewing_debugging_dependencies.html
"""

import re
from typing import Dict, Iterable, List, Optional, Tuple

from gradle_coords.exceptions import ParseError
from gradle_coords.graph import DependencyGraph

# One indent unit is five characters: "|    " or "     ".
INDENT_WIDTH = 5
TREE_LINE_PATTERN = re.compile(r"^(?P<prefix>(?:[| ] {4})*)[+\\]--- (?P<body>.*)$")
MARKER_PATTERN = re.compile(r"\s+(?:\((?P<marker>[^()]*)\)|(?P<failed>FAILED))$")
FOOTER_PATTERN = re.compile(r"^(?:\([*cn]\) - |A web-based, searchable dependency report)")
# Single-bound rich versions, e.g. {strictly 1.0}
RICH_VERSION_PATTERN = re.compile(r"^\{(?:strictly|require|prefer)\s+(?P<version>[^\s;{}]+)\}$")
# Tree glyphs left over from an indent that is not a multiple of five
TREE_GLYPH_PATTERN = re.compile(r"[+\\]--- ")
INVALID_NAME_PATTERN = re.compile(r"[\s|+\\]")

ARROW = "->"
PROJECT_PREFIX = "project "


class ArtifactRecord:
    """A resolved Maven coordinate."""

    def __init__(self, group: str, name: str, version: str) -> None:
        self.group = group
        self.name = name
        self.version = version

    @property
    def key(self) -> Tuple[str, str]:
        """Deduplication key: (group, name)."""
        return self.group, self.name

    @property
    def coordinate(self) -> str:
        """Return the record as ``group:name:version``."""
        return f"{self.group}:{self.name}:{self.version}"

    def to_dict(self) -> Dict[str, str]:
        """Return the record as a plain dictionary."""
        return {"group": self.group, "name": self.name, "version": self.version}

    def __repr__(self) -> str:
        """Return string representation of record."""
        return f"ArtifactRecord({self.coordinate})"

    def __eq__(self, other: object) -> bool:
        """Records are equal when group, name and version all match."""
        if not isinstance(other, ArtifactRecord):
            return NotImplemented
        return (self.group, self.name, self.version) == (other.group, other.name, other.version)

    # Records are updated in place during deduplication.
    __hash__ = None  # type: ignore[assignment]


class ParseLine:
    """One classified tree line, before coordinate extraction."""

    def __init__(self, line_number: int, depth: int, raw_coordinate: str, line: str) -> None:
        self.line_number = line_number
        self.depth = depth
        self.raw_coordinate = raw_coordinate
        self.line = line
        self.coordinate_text, self.marker = strip_marker(raw_coordinate)

    def __repr__(self) -> str:
        return f"ParseLine({self.line_number}, depth={self.depth}, {self.raw_coordinate!r})"


def strip_marker(text: str) -> Tuple[str, Optional[str]]:
    """
    Strip a trailing annotation such as ``(*)``, ``(c)``, ``(n)`` or ``FAILED``.

    Args:
        text: Coordinate text taken from a tree line

    Returns:
        Tuple of (text without the annotation, annotation or None)
    """
    text = text.strip()
    match = MARKER_PATTERN.search(text)
    if not match:
        return text, None
    marker = match.group("marker") if match.group("marker") is not None else match.group("failed")
    return text[: match.start()].rstrip(), marker


def match_tree_line(line: str, line_number: int) -> Optional[ParseLine]:
    """
    Match a line against the ``+--- `` / ``\\--- `` tree pattern.

    Args:
        line: Input line, with or without its line terminator
        line_number: 1-based line number

    Returns:
        ParseLine if the line is a tree line, None otherwise
    """
    text = line.rstrip("\r\n")
    match = TREE_LINE_PATTERN.match(text)
    if not match:
        return None
    depth = len(match.group("prefix")) // INDENT_WIDTH
    return ParseLine(line_number, depth, match.group("body"), text)


def parse_coordinate(text: str) -> Optional[Tuple[str, str, str]]:
    """
    Extract (group, name, resolved version) from coordinate text.

    Handles the shapes Gradle prints::

        org.jetbrains.kotlin:kotlin-stdlib-jdk8:1.6.21
        org.jetbrains.kotlin:kotlin-stdlib:1.6.21 -> 1.7.10
        androidx.compose.ui:ui-tooling -> 1.3.3
        org.slf4j:slf4j-api:{strictly 1.7.36}

    When an arrow is present the requested version is discarded.

    Args:
        text: Coordinate text with any trailing marker already stripped

    Returns:
        Tuple of (group, name, version), or None if the text names a project

    Raises:
        ParseError: If the text is not a valid coordinate
    """
    text = text.strip()
    if text.startswith(PROJECT_PREFIX):
        return None

    resolved: Optional[str] = None
    if ARROW in text:
        text, resolved = (part.strip() for part in text.split(ARROW, 1))
        if not resolved:
            raise ParseError("missing resolved version after '->'", line=text)
        if resolved.startswith(PROJECT_PREFIX):
            # Substituted by a project of the same build
            return None

    segments = [segment.strip() for segment in text.split(":")]
    if resolved is None:
        if len(segments) < 3:
            raise ParseError("expected group:name:version", line=text)
        version = segments[2]
    else:
        if len(segments) < 2:
            raise ParseError("expected group:name before '->'", line=text)
        version = resolved

    group, name = segments[0], segments[1]
    rich_version = RICH_VERSION_PATTERN.match(version)
    if rich_version:
        version = rich_version.group("version")
    if not group or not name or not version:
        raise ParseError("empty group, name or version", line=text)
    if INVALID_NAME_PATTERN.search(group) or INVALID_NAME_PATTERN.search(name):
        raise ParseError("unexpected characters in group or name", line=text)
    if any(char.isspace() for char in version):
        raise ParseError(f"unexpected text in version {version!r}", line=text)
    return group, name, version


class DependencyTreeParser:
    """
    Line-oriented state machine over a Gradle dependency report.

    In standard mode the parser looks for the first top-level tree line,
    parses until the first blank line or legend line, and ignores anything
    that is not a tree line. In skip-pretty mode every non-blank line must be
    a coordinate line.
    """

    _BEFORE_TREE = "before"
    _IN_TREE = "inside"
    _AFTER_TREE = "after"

    def __init__(self, skip_pretty: bool = False) -> None:
        """
        Initialize the parser.

        Args:
            skip_pretty: Treat the input as pre-extracted coordinate lines
        """
        self.skip_pretty = skip_pretty
        self._reset()

    def _reset(self) -> None:
        self.graph = DependencyGraph()
        self.ignored_trees = 0
        self.tree_lines = 0
        self.version_updates = 0
        self.marker_counts: Dict[str, int] = {}
        self._records: Dict[Tuple[str, str], ArtifactRecord] = {}

    def classify_line(self, line: str, line_number: int) -> Optional[ParseLine]:
        """
        Classify one input line.

        Args:
            line: Input line
            line_number: 1-based line number

        Returns:
            ParseLine for a coordinate line, None for a line to ignore

        Raises:
            ParseError: In skip-pretty mode, if a non-blank line is not a coordinate line
        """
        if not line.strip():
            return None

        tree_line = match_tree_line(line, line_number)
        if tree_line is not None:
            return tree_line

        if not self.skip_pretty:
            return None

        text = line.strip()
        if ":" not in text:
            raise ParseError("not a coordinate line", line_number, text)
        if TREE_GLYPH_PATTERN.search(text):
            raise ParseError("malformed tree indentation", line_number, text)
        return ParseLine(line_number, 0, text, text)

    def parse(self, lines: Iterable[str]) -> List[ArtifactRecord]:
        """
        Parse a dependency report.

        Args:
            lines: Iterable of input lines (e.g. sys.stdin)

        Returns:
            Deduplicated records in first-seen order

        Raises:
            ParseError: If a line cannot be parsed in the current mode
        """
        self._reset()
        state = self._IN_TREE if self.skip_pretty else self._BEFORE_TREE
        parents: List[Optional[str]] = []
        previous_was_tree = False

        for line_number, line in enumerate(lines, 1):
            if not self.skip_pretty and state == self._IN_TREE:
                if not line.strip() or FOOTER_PATTERN.match(line):
                    state = self._AFTER_TREE
                    continue

            parse_line = self.classify_line(line, line_number)

            if state == self._AFTER_TREE:
                # Another configuration's tree; only the first one is parsed.
                if parse_line is not None and parse_line.depth == 0 and not previous_was_tree:
                    self.ignored_trees += 1
                previous_was_tree = parse_line is not None
                continue

            if parse_line is None:
                continue

            if state == self._BEFORE_TREE:
                if parse_line.depth != 0:
                    continue
                state = self._IN_TREE

            self.tree_lines += 1
            key = self._add_line(parse_line)

            depth = parse_line.depth
            while len(parents) < depth:
                parents.append(None)
            parent = parents[depth - 1] if depth > 0 else None
            del parents[depth:]
            parents.append(key)

            if key is not None:
                self.graph.add_artifact(key, depth, direct=parent is None)
                if parent is not None:
                    self.graph.add_dependency(parent, key)

        return list(self._records.values())

    def _add_line(self, parse_line: ParseLine) -> Optional[str]:
        """
        Record the coordinate on a tree line.

        Returns:
            Graph key (``group:name``) of the artifact, or None for a project line
        """
        try:
            coordinate = parse_coordinate(parse_line.coordinate_text)
        except ParseError as exc:
            raise ParseError(exc.reason, parse_line.line_number, parse_line.line) from exc
        if coordinate is None:
            return None

        group, name, version = coordinate
        marker = parse_line.marker
        if marker is not None:
            self.marker_counts[marker] = self.marker_counts.get(marker, 0) + 1

        record = self._records.get((group, name))
        if record is None:
            record = ArtifactRecord(group, name, version)
            self._records[record.key] = record
        elif marker is None and record.version != version:
            # Later occurrences win; annotated repeats never overwrite.
            record.version = version
            self.version_updates += 1
        return f"{group}:{name}"

    def get_records(self) -> List[ArtifactRecord]:
        """Return the records of the last parse in first-seen order."""
        return list(self._records.values())

    def get_graph(self) -> DependencyGraph:
        """Return the dependency graph built during the last parse."""
        return self.graph
