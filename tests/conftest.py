"""
Pytest configuration and shared fixtures
"""

import shutil
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sorty.core.diagnostics import CollectingSink, Diagnostic, Level  # noqa: E402
from sorty.core.lint import walk_module  # noqa: E402
from sorty.core.parser import parse_source  # noqa: E402
from sorty.core.source_map import SourceMap  # noqa: E402


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for testing"""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def lint_source() -> Callable[..., list[Diagnostic]]:
    """Run the declaration order lint over a snippet of Rust source"""

    def run(text: str, file: str = "src/lib.rs", level: Level = Level.WARN):
        source_map = SourceMap()
        source_map.add_file(file, text)
        sink = CollectingSink()
        walk_module(parse_source(text, file), source_map, sink, level)
        return sink.diagnostics

    return run


@pytest.fixture
def unsorted_rust_code() -> str:
    """Crate root with every declaration group out of order"""
    return """//! Sample crate

#[macro_use]
extern crate serde_derive;
extern crate regex;
extern crate log;

mod parser;
pub mod config;
mod lexer;

use std::collections::HashMap;
use crate::parser::{Parser, self};
use crate::lexer::Lexer;

fn main() {
    let _map: HashMap<u8, u8> = HashMap::new();
}
"""


@pytest.fixture
def sorted_rust_code() -> str:
    """Crate root whose declarations are already in canonical order"""
    return """#[macro_use]
extern crate serde_derive;
extern crate log;
extern crate regex;

mod lexer;
mod parser;
pub mod config;

use crate::lexer::Lexer;
use crate::parser::{self, Parser};
use std::collections::HashMap;

fn main() {}
"""


@pytest.fixture
def sample_crate(temp_dir: Path, unsorted_rust_code: str) -> Path:
    """Create a small Cargo crate with one unsorted and one sorted file"""
    crate_path = temp_dir / "sample_crate"
    (crate_path / "src").mkdir(parents=True)

    (crate_path / "Cargo.toml").write_text(
        """[package]
name = "sample"
version = "0.1.0"
edition = "2021"
"""
    )
    (crate_path / "src" / "main.rs").write_text(unsorted_rust_code)
    (crate_path / "src" / "config.rs").write_text("use a::A;\nuse b::B;\n")
    (crate_path / "src" / "lexer.rs").write_text("pub struct Lexer;\n")
    (crate_path / "src" / "parser.rs").write_text("pub struct Parser;\n")

    # build output is excluded by default
    (crate_path / "target" / "debug").mkdir(parents=True)
    (crate_path / "target" / "debug" / "build.rs").write_text("use z;\nuse a;\n")

    return crate_path


@pytest.fixture
def test_repo(temp_dir: Path) -> Path:
    """Create a test Git repository"""
    # Initialize Git repo
    subprocess.run(["git", "init"], cwd=temp_dir, capture_output=True)
    subprocess.run(["git", "config", "user.email", "test@test.com"], cwd=temp_dir)
    subprocess.run(["git", "config", "user.name", "Test User"], cwd=temp_dir)

    # Create initial commit
    (temp_dir / "README.md").write_text("Test Repository")
    (temp_dir / "lib.rs").write_text("use a;\nuse b;\n")
    subprocess.run(["git", "add", "."], cwd=temp_dir, capture_output=True)
    subprocess.run(
        ["git", "commit", "-m", "Initial commit"], cwd=temp_dir, capture_output=True
    )

    return temp_dir
