"""
Path analysis for Rust sources.

Determines what a path points at (a single Rust file, a Cargo crate, a Cargo
workspace or a plain directory) and collects the Rust files to check,
honouring the configured exclude patterns.
"""

import fnmatch
import logging
import tomllib
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

CARGO_MANIFEST = "Cargo.toml"
CRATE_ROOTS = ["src/lib.rs", "src/main.rs"]


class PathType(Enum):
    """Enumeration of path types that can be detected"""

    RUST_FILE = "rust_file"
    OTHER_FILE = "other_file"
    CARGO_CRATE = "cargo_crate"
    CARGO_WORKSPACE = "cargo_workspace"
    RUST_PROJECT = "rust_project"
    EMPTY_DIR = "empty_directory"
    UNKNOWN = "unknown"


@dataclass
class PathAnalysis:
    """Result of path analysis with detailed information"""

    path: Path
    path_type: PathType
    is_directory: bool = False
    is_file: bool = False

    # File statistics
    rust_files: list[Path] = field(default_factory=list)
    excluded_files: list[Path] = field(default_factory=list)
    total_files: int = 0

    # Cargo-specific
    has_manifest: bool = False
    crate_name: str | None = None
    crate_roots: list[Path] = field(default_factory=list)
    workspace_members: list[str] = field(default_factory=list)

    description: str = ""


class PathAnalyzer:
    """Finds the Rust sources under a path"""

    def __init__(
        self,
        extensions: list[str] | None = None,
        exclude: list[str] | None = None,
        recursive: bool = True,
    ):
        self.extensions = {ext.lower() for ext in (extensions or [".rs"])}
        self.exclude = exclude or []
        self.recursive = recursive

    def is_rust_file(self, path: Path) -> bool:
        return path.suffix.lower() in self.extensions

    def is_excluded(self, path: Path, root: Path) -> bool:
        """Check a file against the exclude globs, relative to ``root``"""
        try:
            relative = path.relative_to(root).as_posix()
        except ValueError:
            relative = path.as_posix()
        return any(fnmatch.fnmatch(relative, pattern) for pattern in self.exclude)

    def analyze(self, path: Path) -> PathAnalysis:
        """
        Analyze a path and return detailed information.

        Args:
            path: File or directory path to analyze

        Returns:
            PathAnalysis object with detailed information
        """
        if not path.exists():
            return PathAnalysis(
                path=path,
                path_type=PathType.UNKNOWN,
                description=f"Path does not exist: {path}",
            )

        if path.is_file():
            return self._analyze_file(path)
        else:
            return self._analyze_directory(path)

    def _analyze_file(self, path: Path) -> PathAnalysis:
        """Analyze a single file"""
        analysis = PathAnalysis(
            path=path,
            path_type=PathType.OTHER_FILE,
            is_file=True,
            total_files=1,
        )

        if self.is_rust_file(path):
            analysis.path_type = PathType.RUST_FILE
            analysis.rust_files = [path]
            analysis.description = "Rust source file"
        else:
            analysis.description = f"Other file type ({path.suffix})"

        return analysis

    def _analyze_directory(self, path: Path) -> PathAnalysis:
        """Analyze a directory and its contents"""
        analysis = PathAnalysis(
            path=path,
            path_type=PathType.UNKNOWN,
            is_directory=True,
        )

        pattern = "**/*" if self.recursive else "*"
        for file_path in sorted(path.glob(pattern)):
            if not file_path.is_file():
                continue
            analysis.total_files += 1
            if not self.is_rust_file(file_path):
                continue
            if self.is_excluded(file_path, path):
                analysis.excluded_files.append(file_path)
            else:
                analysis.rust_files.append(file_path)

        manifest = path / CARGO_MANIFEST
        if manifest.is_file():
            analysis.has_manifest = True
            self._read_manifest(manifest, analysis)
        elif analysis.rust_files:
            analysis.path_type = PathType.RUST_PROJECT
            analysis.description = "Directory with Rust sources"
        elif analysis.total_files == 0:
            analysis.path_type = PathType.EMPTY_DIR
            analysis.description = "Empty directory"
        else:
            analysis.description = "Directory without Rust sources"

        return analysis

    def _read_manifest(self, manifest: Path, analysis: PathAnalysis) -> None:
        """Fill in crate or workspace details from Cargo.toml"""
        try:
            with open(manifest, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning(f"Could not read {manifest}: {e}")
            data = {}

        root = manifest.parent
        analysis.crate_roots = [
            root / candidate for candidate in CRATE_ROOTS if (root / candidate).is_file()
        ]

        if "workspace" in data and "package" not in data:
            members = data["workspace"].get("members", [])
            analysis.path_type = PathType.CARGO_WORKSPACE
            analysis.workspace_members = list(members)
            analysis.description = f"Cargo workspace with {len(members)} members"
        else:
            analysis.path_type = PathType.CARGO_CRATE
            analysis.crate_name = data.get("package", {}).get("name", root.name)
            analysis.description = f"Cargo crate: {analysis.crate_name}"
