"""
Parse Service

Request boundary for the editor integration: validates parse requests,
runs parse and extraction, and keeps the registry up to date.

Only structurally invalid requests raise (RequestValidationError); files
that fail to parse are logged and yield no components.
"""

from pathlib import Path
from threading import RLock
from typing import Iterable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from extmodel.ast.extractors.component import ComponentExtractor
from extmodel.ast.models import Component, Doc, TextEdit
from extmodel.ast.parser import ParsedSource, SourceParser
from extmodel.configs.logging import get_logger
from extmodel.configs.paths import get_snapshot_path
from extmodel.configs.runtime import get_full_config
from extmodel.exceptions import ParseFailure, RequestValidationError
from extmodel.registry import ComponentRegistry

logger = get_logger("service")


# --- Request Models ---


class ParseRequest(BaseModel):
    """A file to parse, optionally with edits against its previous text."""

    model_config = ConfigDict(populate_by_name=True)

    text: str = Field(..., description="Source text the edits apply to")
    fs_path: str = Field("", alias="fsPath", description="Path the text belongs to")
    project: Optional[str] = Field(None, description="Project scope (default project if omitted)")
    namespace: str = Field("", alias="nameSpace", description="Workspace namespace")
    edits: list[TextEdit] = Field(default_factory=list, description="Incremental edits, applied in order")


class ParseService:
    """
    Parses class definition files into the registry.

    The last tree parsed for each (project, file) is kept so requests that
    carry edits can reparse incrementally.
    """

    def __init__(
        self,
        registry: ComponentRegistry,
        parser: Optional[SourceParser] = None,
        config: Optional[dict] = None,
    ):
        self.config = config if config is not None else get_full_config()
        self.registry = registry
        self.parser = parser or SourceParser(strict_syntax=self.config["strict_syntax"])
        self.extractor = ComponentExtractor(self.config, parser=self.parser)
        self._trees: dict[tuple[str, str], ParsedSource] = {}
        self._lock = RLock()

    def validate(self, request: Union[ParseRequest, dict]) -> ParseRequest:
        """
        Validate a raw request payload.

        Raises:
            RequestValidationError: If the payload is structurally invalid
        """
        if isinstance(request, ParseRequest):
            return request
        try:
            return ParseRequest.model_validate(request)
        except ValidationError as e:
            logger.error(f"Invalid parse request: {e}")
            raise RequestValidationError("Invalid parse request", e.errors(include_url=False)) from e

    def parse(self, request: Union[ParseRequest, dict]) -> list[Component]:
        """
        Parse one file and upsert its components.

        Args:
            request: ParseRequest or its dict payload

        Returns:
            Components found in the file ([] if it does not parse)

        Raises:
            RequestValidationError: If the payload is structurally invalid
        """
        req = self.validate(request)
        project = req.project or self.config["default_project"]
        key = (project, req.fs_path)

        with self._lock:
            previous = self._trees.pop(key, None) if req.edits and req.fs_path else None

        try:
            parsed = self.parser.parse(req.text, req.edits, previous)
        except ParseFailure as e:
            logger.warning(f"Failed to parse {req.fs_path or '<text>'}: {e}")
            return []

        if req.fs_path:
            with self._lock:
                self._trees[key] = parsed

        components = self.extractor.extract(parsed, fs_path=req.fs_path, project=project, namespace=req.namespace)
        self.registry.upsert(components)
        logger.info(f"Parsed {len(components)} component(s) from {req.fs_path or '<text>'}")
        return components

    def index_files(
        self,
        paths: Iterable[Union[str, Path]],
        project: Optional[str] = None,
        namespace: str = "",
    ) -> int:
        """
        Parse files from disk into the registry.

        Unsupported, unreadable and malformed files are skipped.

        Returns:
            Number of components indexed
        """
        project = project or self.config["default_project"]
        count = 0

        for path in paths:
            fs_path = str(path)
            if not self.parser.is_supported(fs_path):
                logger.debug(f"Skipping unsupported file {fs_path}")
                continue
            try:
                parsed = self.parser.parse_file(fs_path)
            except ParseFailure as e:
                logger.warning(f"Failed to parse {fs_path}: {e}")
                continue

            components = self.extractor.extract(parsed, fs_path=fs_path, project=project, namespace=namespace)
            count += self.registry.upsert(components)

        logger.info(f"Indexed {count} component(s) into project '{project}'")
        return count

    def parse_doc(
        self,
        property_name: str,
        p_type: str,
        component_class: str,
        is_private: bool = False,
        is_static: bool = False,
        is_singleton: bool = False,
        comment: Optional[str] = None,
    ) -> Doc:
        """Parse a documentation comment for a hover or completion request."""
        return self.extractor.doc_parser.parse(
            property_name, p_type, component_class, is_private, is_static, is_singleton, comment
        )

    # --- Snapshots ---

    def save_snapshot(self, project: Optional[str] = None) -> Path:
        """Write a project's components to its snapshot file."""
        project = project or self.config["default_project"]
        path = get_snapshot_path(project)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.registry.dump_json(project, indent=2), encoding="utf-8")
        logger.info(f"Saved snapshot for '{project}' to {path}")
        return path

    def load_snapshot(self, project: Optional[str] = None) -> int:
        """
        Upsert a project's components from its snapshot file.

        Returns:
            Number of components loaded (0 if there is no snapshot)

        Raises:
            RegistryError: If the snapshot is malformed
        """
        project = project or self.config["default_project"]
        path = get_snapshot_path(project)
        if not path.exists():
            logger.debug(f"No snapshot for '{project}' at {path}")
            return 0
        return self.registry.load_json(path.read_text(encoding="utf-8"))
