"""
Unit tests for declaration classification
"""

import pytest
from sorty.core.classifier import DeclarationRecord, classify
from sorty.core.parser import parse_source
from sorty.core.source_map import SourceMap
from sorty.core.syntax import Span


def declarations(source: str):
    return classify(parse_source(source, "src/lib.rs"), SourceMap())


def names(records) -> list[str]:
    return [record.display_name for record in records]


class TestClassify:
    """Test bucketing of module items into declaration groups"""

    def test_groups_are_separated(self):
        """Test interleaved declarations land in their own groups"""
        result = declarations(
            "use b;\nextern crate z;\nmod m;\nuse a;\nfn f() {}\nextern crate y;\n"
        )

        assert names(result.extern_crates) == ["z", "y"]
        assert names(result.mods) == ["m"]
        assert names(result.uses) == ["b", "a"]

    def test_std_crate_is_skipped(self):
        result = declarations("extern crate std;\nextern crate core;\n")

        assert names(result.extern_crates) == ["core"]

    def test_renamed_extern_crate(self):
        """Test renamed crates display both names and sort by the bound one"""
        result = declarations("extern crate alpha as zeta;\n")
        record = result.extern_crates[0]

        assert record.display_name == "alpha as zeta"
        assert record.key_name == "zeta"

    def test_extern_crate_never_public(self):
        result = declarations("#[macro_use]\npub extern crate log;\n")

        assert result.extern_crates[0].attribute_prefix == "#[macro_use]\n"

    def test_inline_modules_are_skipped(self):
        """Test only modules declared in another file are tracked"""
        result = declarations("mod inline {}\nmod outer;\n")

        assert names(result.mods) == ["outer"]

    def test_public_module_prefix(self):
        result = declarations("#[cfg(test)]\npub mod tests;\n")

        assert result.mods[0].attribute_prefix == "#[cfg(test)]\npub "

    def test_std_globs_are_skipped(self):
        """Test prelude globs are ignored but other globs are kept"""
        result = declarations("use std::prelude::v1::*;\nuse foo::*;\nuse std::fmt;\n")

        assert names(result.uses) == ["foo::*", "std::fmt"]

    def test_use_renames(self):
        result = declarations("use a::b as c;\nuse a::d as d;\n")

        assert names(result.uses) == ["a::b as c", "a::d"]

    def test_unsorted_use_list_forces_warning(self):
        result = declarations("use foo::{b, a};\nuse bar::{self, x};\n")

        assert result.uses[0].display_name == "foo::{a, b}"
        assert result.uses[0].force_warn is True
        assert result.uses[1].force_warn is False

    def test_doc_comments_do_not_change_prefix(self):
        result = declarations("/// Parser\nmod parser;\n")

        assert result.mods[0].attribute_prefix == ""

    def test_malformed_attribute_propagates(self):
        with pytest.raises(ValueError):
            declarations("#[limit = 3]\nuse a;\n")


class TestDeclarationRecord:
    def test_key_name_defaults_to_display_name(self):
        record = DeclarationRecord("a::b", "", Span(0, 1, "f.rs"))

        assert record.key_name == "a::b"
