"""Language file loading interface and implementations.

Defines the contract for turning language files into flat string maps and
provides a loader with YAML and JSON parsers.
"""

import fnmatch
import json
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import yaml

from core.logging import get_module_logger
from infrastructure.i18n.exceptions import LanguageLoadError

logger = get_module_logger()

PathLike = Union[str, "os.PathLike[str]"]

# (file name, parsed strings map) -> language tag
LangFileToCodeFunction = Callable[[str, Dict[str, Any]], str]

# Glob pattern(s) matched against file names, or predicate on the file path
FileFilter = Union[str, Sequence[str], Callable[[Path], bool]]


class StringsParser(ABC):
    """Abstract base for language file parsers.

    Attributes:
        name: Parser name used in diagnostics.
        extensions: File extensions handled, including the dot (".yml").
    """

    name: str = "parser"
    extensions: Iterable[str] = ()

    @abstractmethod
    def parse(self, content: str) -> Any:
        """Parse file content into a document.

        Args:
            content: Decoded file content.

        Returns:
            Parsed document; loaders require it to be a mapping.

        Raises:
            ValueError: If the content cannot be parsed.
        """
        pass


class YAMLStringsParser(StringsParser):
    """Parser for YAML language files."""

    name = "yaml"
    extensions = (".yml", ".yaml")

    def parse(self, content: str) -> Any:
        try:
            return yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML: {e}") from e


class JSONStringsParser(StringsParser):
    """Parser for JSON language files."""

    name = "json"
    extensions = (".json",)

    def parse(self, content: str) -> Any:
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON: {e}") from e


class FileLoader(ABC):
    """Abstract base for language file loaders.

    Implementations turn a file into a flat key -> value mapping and a
    directory into a language tag -> mapping tree.
    """

    @abstractmethod
    def load_strings_map(self, path: PathLike) -> Dict[str, Any]:
        """Load the strings map of a single language file.

        Args:
            path: Path of the language file.

        Returns:
            Mapping of string key to raw value.

        Raises:
            LanguageLoadError: If the file is unreadable or unparsable.
        """
        pass

    @abstractmethod
    def directory_to_languages_tree(
        self,
        directory: PathLike,
        to_lang_code: Optional[LangFileToCodeFunction] = None,
        file_filter: Optional[FileFilter] = None,
        throw_on_error: bool = False,
    ) -> Dict[str, Dict[str, Any]]:
        """Load every language file of a directory.

        Args:
            directory: Directory to enumerate.
            to_lang_code: Derives the language tag of a file.
            file_filter: Glob pattern(s) or predicate selecting files.
            throw_on_error: Raise on the first unreadable file instead of
                skipping it.

        Returns:
            Mapping of language tag to strings map.

        Raises:
            LanguageLoadError: If the directory is missing, or a file fails
                and throw_on_error is set.
        """
        pass


def default_lang_code(file_name: str, strings_map: Optional[Dict[str, Any]] = None) -> str:
    """Language tag of a file: its base name without extension."""
    return os.path.splitext(os.path.basename(file_name))[0]


class LanguageFileLoader(FileLoader):
    """Loader for YAML and JSON language files.

    Files are flat mappings of string key to value:

        +NAME: English
        +COUNTRY: United States
        GREETING: "Hi {name}"

    Attributes:
        parsers: Registered parsers keyed by file extension.
    """

    def __init__(self, parsers: Optional[Iterable[StringsParser]] = None):
        """Initialize the loader with the YAML and JSON parsers.

        Args:
            parsers: Additional parsers; they take precedence over the
                presets for the extensions they declare.
        """
        self.parsers: Dict[str, StringsParser] = {}
        for parser in (YAMLStringsParser(), JSONStringsParser(), *(parsers or ())):
            self.add_parser(parser)

        logger.info(
            "initialized_file_loader",
            extensions=sorted(self.parsers),
        )

    def add_parser(self, parser: StringsParser) -> None:
        """Register a parser for every extension it declares."""
        for extension in parser.extensions:
            self.parsers[extension.lower()] = parser

    def get_parser(self, path: PathLike) -> Optional[StringsParser]:
        """Parser responsible for a file, by extension."""
        return self.parsers.get(Path(path).suffix.lower())

    def load_strings_map(self, path: PathLike) -> Dict[str, Any]:
        file_path = Path(path)
        parser = self.get_parser(file_path)

        if parser is None:
            raise LanguageLoadError(
                f'No parser registered for "{file_path.suffix}" files: {file_path}',
                path=str(file_path),
            )

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise LanguageLoadError(
                f"Cannot read {file_path}: {e}", path=str(file_path)
            ) from e

        try:
            data = parser.parse(content)
        except ValueError as e:
            logger.error(
                "language_file_parse_error",
                file=str(file_path),
                parser=parser.name,
                error=str(e),
            )
            raise LanguageLoadError(
                f"Failed to parse {file_path}: {e}", path=str(file_path)
            ) from e

        if data is None:
            data = {}

        if not isinstance(data, Mapping):
            raise LanguageLoadError(
                f"{file_path} must contain a mapping of strings, "
                f"got {type(data).__name__}",
                path=str(file_path),
            )

        strings_map = {str(key): value for key, value in data.items()}

        logger.debug(
            "loaded_strings_map",
            file=str(file_path),
            key_count=len(strings_map),
        )
        return strings_map

    def load_many(self, paths: Iterable[PathLike]) -> Dict[str, Any]:
        """Load several files and merge them, later files winning."""
        merged: Dict[str, Any] = {}
        for path in paths:
            merged.update(self.load_strings_map(path))
        return merged

    def directory_to_languages_tree(
        self,
        directory: PathLike,
        to_lang_code: Optional[LangFileToCodeFunction] = None,
        file_filter: Optional[FileFilter] = None,
        throw_on_error: bool = False,
    ) -> Dict[str, Dict[str, Any]]:
        directory_path = Path(directory)
        if not directory_path.is_dir():
            raise LanguageLoadError(
                f"Languages directory not found: {directory_path}",
                path=str(directory_path),
            )

        to_lang_code = to_lang_code or default_lang_code
        tree: Dict[str, Dict[str, Any]] = {}

        for file_path in self._select_files(directory_path, file_filter):
            try:
                strings_map = self.load_strings_map(file_path)
            except LanguageLoadError as e:
                if throw_on_error:
                    raise
                logger.warning(
                    "skipped_language_file",
                    file=str(file_path),
                    error=str(e),
                )
                continue

            lang_code = to_lang_code(file_path.name, strings_map)
            if lang_code in tree:
                logger.warning(
                    "language_file_merged",
                    file=str(file_path),
                    language=lang_code,
                )
                tree[lang_code].update(strings_map)
            else:
                tree[lang_code] = strings_map

        logger.info(
            "loaded_languages_tree",
            directory=str(directory_path),
            languages=list(tree),
        )
        return tree

    def _select_files(
        self, directory: Path, file_filter: Optional[FileFilter]
    ) -> List[Path]:
        files = [
            p
            for p in sorted(directory.iterdir())
            if p.is_file() and self.get_parser(p) is not None
        ]

        if file_filter is None:
            return files

        if callable(file_filter):
            return [p for p in files if file_filter(p)]

        patterns = [file_filter] if isinstance(file_filter, str) else list(file_filter)
        return [
            p
            for p in files
            if any(fnmatch.fnmatch(p.name, pattern) for pattern in patterns)
        ]
