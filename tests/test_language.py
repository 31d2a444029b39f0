"""Tests for editor language detection."""

import pytest

from codereviewer.language import (
    DEFAULT_LANGUAGE,
    LANGUAGE_RULES,
    SUPPORTED_LANGUAGES,
    detect_language,
    match_language,
)


class TestDetectLanguage:
    """Each rule in isolation."""

    @pytest.mark.parametrize("code,expected", [
        ("<?php echo 'hi'; ?>", "php"),
        ("import React from 'react';", "jsx"),
        ('<div className="box"></div>', "jsx"),
        ("<template><div/></template>", "javascript"),
        ("export default {\n  data() { return {} }\n}", "javascript"),
        ("def greet(name):\n    return name", "python"),
        ("public class Main {}", "java"),
        ("private void run()", "java"),
        ("using namespace std;", "cpp"),
        ("std::vector<int> v;", "cpp"),
        ("@media (max-width: 600px) { }", "css"),
        ("@import url('a.css');", "css"),
        ("@keyframes spin { }", "css"),
        ("interface User { name: string }", "typescript"),
        ("type Id = number", "typescript"),
        ("let name: string", "typescript"),
    ])
    def test_single_rule(self, code, expected):
        assert detect_language(code) == expected

    def test_no_match_keeps_previous(self):
        assert detect_language("console.log(1)", previous="python") == "python"

    def test_no_match_defaults(self):
        assert detect_language("console.log(1)") == DEFAULT_LANGUAGE
        assert detect_language("") == DEFAULT_LANGUAGE

    def test_match_language_none(self):
        assert match_language("x = 1") is None


class TestRulePriority:
    """First matching rule wins."""

    def test_python_beats_typescript(self):
        code = "def foo():\n    pass\ninterface Foo"
        assert detect_language(code) == "python"

    def test_python_with_braces_falls_through_to_typescript(self):
        code = "def foo():\n    d = {}\ninterface Foo"
        assert detect_language(code) == "typescript"

    def test_php_beats_everything(self):
        code = "<?php\nimport React\npublic class X {}\nstd::cout"
        assert detect_language(code) == "php"

    def test_jsx_beats_vue(self):
        assert detect_language("import React\nexport default {") == "jsx"

    def test_vue_beats_python(self):
        assert detect_language("<template>\ndef x:</template>") == "javascript"

    def test_java_beats_cpp(self):
        assert detect_language("public class A {}\nstd::string s;") == "java"

    def test_cpp_beats_css(self):
        assert detect_language("std::cout << x;\n@media print {}") == "cpp"

    def test_css_beats_typescript(self):
        assert detect_language("@media screen {}\ntype X = 1") == "css"

    def test_rule_order(self):
        tags = [tag for _, tag in LANGUAGE_RULES]
        assert tags == ["php", "jsx", "javascript", "python", "java", "cpp", "css", "typescript"]

    def test_rule_tags_are_supported(self):
        for _, tag in LANGUAGE_RULES:
            assert tag in SUPPORTED_LANGUAGES
