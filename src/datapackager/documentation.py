"""Documentation synthesis for data objects.

The editable documentation corpus (data-raw/documentation.md) is a sequence of
Markdown blocks, each introduced by a marker line naming what it documents:

    <!-- datapackager: mypkg -->
    # mypkg
    ...
    <!-- datapackager: tbl -->
    ## tbl
    ...

Blocks are keyed by name. Stubs are generated only for objects that have no
block yet; an existing block is never rewritten, and blocks for objects that
are no longer built are kept. The merged corpus is then published to
docs/<package>.md.
"""

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from datapackager.digest_store import atomic_write_text
from datapackager.models import DataPackage
from datapackager.templates import StubRenderer

logger = logging.getLogger(__name__)

Stubs = dict[str, str]

MARKER_RE = re.compile(r"^<!-- datapackager: (?P<name>[^\s]+) -->[ \t]*$", re.MULTILINE)


def marker(name: str) -> str:
    return f"<!-- datapackager: {name} -->"


@dataclass
class DocumentationCorpus:
    """Parsed documentation file.

    Attributes:
        stubs: Name to block text, in file order
        preamble: Free text before the first marker
    """

    stubs: Stubs = field(default_factory=dict)
    preamble: str = ""

    def to_text(self) -> str:
        return format_documentation(self.stubs, preamble=self.preamble)


def parse_documentation(text: str) -> DocumentationCorpus:
    """Split a documentation file into named blocks.

    A name appearing twice keeps its first block.
    """
    matches = list(MARKER_RE.finditer(text))
    if not matches:
        return DocumentationCorpus(preamble=text.strip("\n"))

    corpus = DocumentationCorpus(preamble=text[: matches[0].start()].strip("\n"))
    for i, match in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        name = match.group("name")
        block = text[match.end() : end].strip("\n")
        if name in corpus.stubs:
            logger.warning("Duplicate documentation block for %s ignored", name)
            continue
        corpus.stubs[name] = block

    return corpus


def format_documentation(stubs: Mapping[str, str], preamble: str = "") -> str:
    """Join named blocks back into documentation file text."""
    parts = [preamble.strip("\n")] if preamble.strip() else []
    for name, block in stubs.items():
        body = block.strip("\n")
        parts.append(f"{marker(name)}\n{body}" if body else marker(name))
    return "\n\n".join(parts) + "\n" if parts else ""


def merge_stubs(existing: Mapping[str, str], new: Mapping[str, str]) -> Stubs:
    """Merge newly generated stubs into existing documentation.

    Existing entries always win; names only in new are appended in their
    order; names only in existing are kept. Never fails.
    """
    merged: Stubs = dict(existing)
    for name, block in new.items():
        if name not in merged:
            merged[name] = block
    return merged


class DocumentationWriter:
    """Publishes the merged documentation to the package docs directory."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def write(self, stubs: Mapping[str, str]) -> Path:
        atomic_write_text(self.path, format_documentation(stubs))
        logger.info("Copied documentation to %s", self.path)
        return self.path


class DocumentationSynthesizer:
    """Keeps the documentation corpus in step with the built objects."""

    def __init__(
        self,
        package: DataPackage,
        package_name: str,
        writer: DocumentationWriter | None = None,
        renderer: StubRenderer | None = None,
    ) -> None:
        """Initialize the synthesizer.

        Args:
            package: Package being documented
            package_name: Name from the manifest, keys the package-level block
            writer: Sink for the published documentation
            renderer: Stub renderer
        """
        self.package = package
        self.package_name = package_name
        self.writer = writer or DocumentationWriter(package.docs_dir / f"{package_name}.md")
        self._renderer = renderer or StubRenderer()

    def autogenerate(
        self,
        names: Iterable[str],
        objects: Mapping[str, Any],
        include_package: bool = False,
    ) -> Stubs:
        """Generate one stub per name.

        Args:
            names: Object names to document
            objects: Merged objects, used to describe each value
            include_package: Also generate the package-level stub first

        Returns:
            Newly generated stubs
        """
        names = list(names)
        stubs: Stubs = {}
        if include_package:
            stubs[self.package_name] = self._renderer.render_package(self.package_name, objects)
        for name in names:
            stubs[name] = self._renderer.render_object(
                name, objects.get(name), package_name=self.package_name
            )
        return stubs

    def missing_documentation(self, corpus: DocumentationCorpus, objects: Mapping[str, Any]) -> list[str]:
        """Objects without a block in the corpus, in sorted order."""
        documented = set(corpus.stubs) - {self.package_name}
        return sorted(set(objects) - documented)

    def load_corpus(self) -> DocumentationCorpus | None:
        path = self.package.documentation_file
        if not path.exists():
            return None
        return parse_documentation(path.read_text(encoding="utf-8"))

    def synthesize(self, objects: Mapping[str, Any]) -> Stubs:
        """Bring the corpus up to date and publish it.

        Args:
            objects: Merged objects of the build

        Returns:
            The published stubs
        """
        doc_file = self.package.documentation_file
        corpus = self.load_corpus()

        if corpus is None:
            logger.info("Writing documentation stubs to %s", doc_file)
            corpus = DocumentationCorpus(
                stubs=self.autogenerate(sorted(objects), objects, include_package=True)
            )
            atomic_write_text(doc_file, corpus.to_text())
        else:
            missing = self.missing_documentation(corpus, objects)
            if missing:
                logger.info("Writing missing docs for: %s", ", ".join(missing))
                new_stubs = self.autogenerate(
                    missing,
                    objects,
                    include_package=self.package_name not in corpus.stubs,
                )
                corpus.stubs = merge_stubs(corpus.stubs, new_stubs)
                logger.info("Writing merged docs.")
                atomic_write_text(doc_file, corpus.to_text())

        self.writer.write(corpus.stubs)
        return corpus.stubs
