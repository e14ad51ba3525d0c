"""Tests for starting snippet selection."""

import logging

import pytest

from asmcc.errors import ConfigResolutionError
from asmcc.options import CompilerConfig, Language
from asmcc.templates import C_TEMPLATE, CXX_TEMPLATE, read_template, select_template


class TestSelectTemplate:
    """Tests for select_template."""

    @pytest.mark.parametrize(
        "language,expected",
        [
            (Language.CPP, CXX_TEMPLATE),
            (Language.OBJECTIVE_CPP, CXX_TEMPLATE),
            (Language.C, C_TEMPLATE),
            (Language.OBJECTIVE_C, C_TEMPLATE),
        ],
    )
    def test_language_default(self, language, expected):
        assert select_template(CompilerConfig(language=language)) == expected

    def test_custom_template(self, tmp_path):
        path = tmp_path / "tmpl.cpp"
        path.write_text("int main() {}\n")

        assert select_template(CompilerConfig(), path) == "int main() {}\n"

    def test_unreadable_template_falls_back_with_warning(self, tmp_path, caplog):
        missing = tmp_path / "missing.cpp"

        with caplog.at_level(logging.WARNING, logger="asmcc.templates"):
            text = select_template(CompilerConfig(language="c"), missing)

        assert text == C_TEMPLATE
        assert "Unable to read template file" in caplog.text

    def test_read_template_raises(self, tmp_path):
        with pytest.raises(ConfigResolutionError):
            read_template(tmp_path / "missing.cpp")
