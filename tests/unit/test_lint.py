"""
Unit tests for the unsorted_declarations lint
"""

import logging

from sorty.core.diagnostics import CollectingSink, Level, Severity
from sorty.core.lint import UNSORTED_DECLARATIONS, check_mod, lint_level, walk_module
from sorty.core.parser import parse_source
from sorty.core.source_map import SourceMap

USE_MESSAGE = "use statements should be in alphabetical order!"
MOD_MESSAGE = "module declarations (other than inline modules) should be in alphabetical order!"
CRATE_MESSAGE = "crate declarations should be in alphabetical order!"


class TestCheckMod:
    """Test the lint on single modules"""

    def test_std_import_moves_to_the_end(self, lint_source):
        """Test a leading std import is reported with the whole group"""
        source = "use std::fmt;\nuse alpha::Bar;\nuse beta::Baz;\n"

        diagnostics = lint_source(source)

        assert len(diagnostics) == 1
        diagnostic = diagnostics[0]
        assert diagnostic.message == USE_MESSAGE
        assert diagnostic.severity == Severity.WARNING
        assert diagnostic.lint == UNSORTED_DECLARATIONS.name
        assert diagnostic.suggestion == (
            "Try this...\n\nuse alpha::Bar;\nuse beta::Baz;\nuse std::fmt;\n"
        )
        assert diagnostic.span.lo == 0
        assert diagnostic.span.hi == source.rindex(";") + 1

    def test_unsorted_use_list(self, lint_source):
        diagnostics = lint_source("use foo::{c, a, self, b};\n")

        assert len(diagnostics) == 1
        assert diagnostics[0].suggestion == "Try this...\n\nuse foo::{self, a, b, c};\n"

    def test_macro_use_crate_first(self, lint_source):
        diagnostics = lint_source(
            "extern crate alpha;\n#[macro_use]\nextern crate zeta;\n"
        )

        assert len(diagnostics) == 1
        assert diagnostics[0].message == CRATE_MESSAGE
        assert diagnostics[0].suggestion == (
            "Try this...\n\n#[macro_use]\nextern crate zeta;\nextern crate alpha;\n"
        )

    def test_pub_module_last(self, lint_source):
        """Test public modules belong after private ones"""
        assert lint_source("mod a;\npub mod b;\n") == []
        assert lint_source("pub mod b;\nmod a;\n")[0].suggestion == (
            "Try this...\n\nmod a;\npub mod b;\n"
        )

        diagnostics = lint_source("pub mod a;\nmod b;\n")

        assert len(diagnostics) == 1
        assert diagnostics[0].message == MOD_MESSAGE
        assert diagnostics[0].suggestion == "Try this...\n\nmod b;\npub mod a;\n"

    def test_renamed_crates_sort_by_bound_name(self, lint_source):
        assert lint_source("extern crate zeta;\nextern crate alpha as zz;\n") == []
        assert len(lint_source("extern crate zz;\nextern crate omega as alpha;\n")) == 1

    def test_pub_use_last(self, lint_source):
        diagnostics = lint_source("pub use a;\nuse b;\n")

        assert diagnostics[0].suggestion == "Try this...\n\nuse b;\npub use a;\n"

    def test_inline_modules_are_ignored(self, lint_source):
        assert lint_source("mod inline {}\nmod alpha;\nmod beta;\n") == []

    def test_groups_are_independent(self, lint_source):
        """Test one diagnostic per unsorted group, crates before uses"""
        source = "extern crate b;\nuse y;\nextern crate a;\nuse x;\nmod m;\n"

        diagnostics = lint_source(source)

        assert [d.message for d in diagnostics] == [CRATE_MESSAGE, USE_MESSAGE]

    def test_interleaving_across_groups_is_fine(self, lint_source):
        assert lint_source("use b;\nextern crate a;\nuse c;\n") == []

    def test_one_diagnostic_per_group(self, lint_source):
        diagnostics = lint_source("use d;\nuse c;\nuse b;\nuse a;\n")

        assert len(diagnostics) == 1
        assert diagnostics[0].span.lo == 0

    def test_divergence_in_the_middle(self, lint_source):
        source = "use a;\nuse c;\nuse b;\n"

        diagnostics = lint_source(source)

        assert diagnostics[0].span.lo == source.index("use c")
        assert diagnostics[0].suggestion == "Try this...\n\nuse b;\nuse c;\n"

    def test_doc_comments_are_not_suggested(self, lint_source):
        diagnostics = lint_source("/// Second\nmod b;\nmod a;\n")

        assert diagnostics[0].suggestion == "Try this...\n\nmod a;\nmod b;\n"

    def test_sorted_module(self, lint_source, sorted_rust_code):
        assert lint_source(sorted_rust_code) == []

    def test_every_group_reported(self, lint_source, unsorted_rust_code):
        diagnostics = lint_source(unsorted_rust_code)

        assert [d.message for d in diagnostics] == [
            CRATE_MESSAGE,
            MOD_MESSAGE,
            USE_MESSAGE,
        ]
        assert diagnostics[0].suggestion == (
            "Try this...\n\nextern crate log;\nextern crate regex;\n"
        )
        assert diagnostics[1].suggestion == (
            "Try this...\n\nmod lexer;\nmod parser;\npub mod config;\n"
        )
        assert diagnostics[2].suggestion == (
            "Try this...\n\nuse crate::lexer::Lexer;\n"
            "use crate::parser::{self, Parser};\n"
            "use std::collections::HashMap;\n"
        )

    def test_repeated_runs_agree(self, lint_source, unsorted_rust_code):
        assert lint_source(unsorted_rust_code) == lint_source(unsorted_rust_code)

    def test_malformed_attribute_skips_module(self, lint_source, caplog):
        """Test a malformed attribute only skips the check of its own module"""
        with caplog.at_level(logging.ERROR, logger="sorty.core.lint"):
            assert lint_source("#[foo = 1]\nuse b;\nuse a;\n") == []

        assert "unexpected int literal" in caplog.text

    def test_malformed_attribute_keeps_parent_diagnostics(self, lint_source):
        """Test the enclosing module is still reported when a nested one is malformed"""
        source = "use b::B;\nuse a::A;\nmod inner {\n    #[cfg(foo = 1)]\n    mod x;\n}\n"

        diagnostics = lint_source(source)

        assert [diagnostic.message for diagnostic in diagnostics] == [USE_MESSAGE]
        assert diagnostics[0].span.lo == 0

    def test_malformed_attribute_keeps_nested_diagnostics(self, lint_source):
        """Test inline modules below a malformed module are still checked"""
        source = "#[foo = 1]\nuse a;\nmod inner {\n    use d;\n    use c;\n}\n"

        diagnostics = lint_source(source)

        assert [diagnostic.message for diagnostic in diagnostics] == [USE_MESSAGE]
        assert diagnostics[0].span.lo == source.index("use d")

    def test_check_mod_allow(self):
        source = "use b;\nuse a;\n"
        source_map = SourceMap()
        source_map.add_file("src/lib.rs", source)
        sink = CollectingSink()

        check_mod(parse_source(source, "src/lib.rs"), source_map, sink, Level.ALLOW)

        assert sink.diagnostics == []


class TestLintLevels:
    """Test allow/warn/deny/forbid handling"""

    def test_allow_in_module(self, lint_source):
        assert lint_source("#![allow(unsorted_declarations)]\nuse b;\nuse a;\n") == []

    def test_tool_path(self, lint_source):
        assert lint_source("#![allow(sorty::unsorted_declarations)]\nuse b;\nuse a;\n") == []

    def test_other_lints_do_not_matter(self, lint_source):
        assert len(lint_source("#![allow(dead_code)]\nuse b;\nuse a;\n")) == 1

    def test_deny_in_module(self, lint_source):
        diagnostics = lint_source("#![deny(unsorted_declarations)]\nuse b;\nuse a;\n")

        assert diagnostics[0].severity == Severity.ERROR

    def test_level_argument(self, lint_source):
        assert lint_source("use b;\nuse a;\n", level=Level.ALLOW) == []
        assert lint_source("use b;\nuse a;\n", level=Level.DENY)[0].severity == Severity.ERROR

    def test_inline_module_is_checked(self, lint_source):
        source = "mod inner {\n    use b;\n    use a;\n}\n"

        diagnostics = lint_source(source)

        assert len(diagnostics) == 1
        assert diagnostics[0].span.lo == source.index("use b")

    def test_allow_on_inline_module(self, lint_source):
        source = "#[allow(unsorted_declarations)]\nmod inner {\n    use b;\n    use a;\n}\n"

        assert lint_source(source) == []

    def test_warn_inside_allowed_module(self, lint_source):
        source = (
            "#![allow(unsorted_declarations)]\n"
            "use b;\nuse a;\n"
            "mod inner {\n    #![warn(unsorted_declarations)]\n    use d;\n    use c;\n}\n"
        )

        diagnostics = lint_source(source)

        assert len(diagnostics) == 1
        assert diagnostics[0].span.lo == source.index("use d")

    def test_forbid_cannot_be_lowered(self, lint_source):
        source = (
            "#![forbid(unsorted_declarations)]\n"
            "#[allow(unsorted_declarations)]\n"
            "mod inner { use b; use a; }\n"
        )

        diagnostics = lint_source(source)

        assert len(diagnostics) == 1
        assert diagnostics[0].severity == Severity.ERROR

    def test_lint_level_helper(self):
        module = parse_source(
            "#![deny(unsorted_declarations)]\n#![allow(unsorted_declarations)]\n",
            "src/lib.rs",
        )

        assert lint_level(module.inner_attrs, Level.WARN) == Level.ALLOW
        assert lint_level(module.inner_attrs, Level.FORBID) == Level.FORBID
        assert lint_level((), Level.DENY) == Level.DENY


class TestCollectingSink:
    def test_warnings_and_errors(self):
        source = (
            "#![deny(unsorted_declarations)]\n"
            "use b;\nuse a;\n"
            "mod inner {\n    #![warn(unsorted_declarations)]\n    mod z;\n    mod y;\n}\n"
        )
        source_map = SourceMap()
        source_map.add_file("src/lib.rs", source)
        sink = CollectingSink()

        walk_module(parse_source(source, "src/lib.rs"), source_map, sink)

        assert [d.message for d in sink.errors] == [USE_MESSAGE]
        assert [d.message for d in sink.warnings] == [MOD_MESSAGE]
