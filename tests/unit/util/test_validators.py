# pylint: disable=missing-docstring
import pytest

from eventformatter.factory_error import InvalidConfigurationErrors
from eventformatter.util.validators import matcher_errors, matchers_validator, validate_options

VALID_OPTIONS = {
    "instructions": {"message": "{{ conditions }}"},
    "mode": "clean",
    "matchers": [{"regexp": "^(\\w+)", "path": "{{ date.pretty }}", "to": "pretty_date"}],
}

test_cases = [  # testcase, options, expected errors
    ("valid options", VALID_OPTIONS, []),
    (
        "valid options without matchers",
        {"instructions": {"message": "x"}, "mode": "merge"},
        [],
    ),
    ("options are no hash", ["instructions"], ["options must be a hash"]),
    ("missing mode", {"instructions": {"message": "x"}}, ["instructions and mode need to be present."]),
    ("missing instructions", {"mode": "clean"}, ["instructions and mode need to be present."]),
    (
        "empty instructions and blank mode",
        {"instructions": {}, "mode": "  "},
        ["instructions and mode need to be present."],
    ),
    (
        "instructions are no hash",
        {"instructions": "message", "mode": "clean"},
        ["instructions must be a hash"],
    ),
    ("mode is no string", {"instructions": {"message": "x"}, "mode": 1}, ["mode must be a string"]),
    (
        "bad template in instructions",
        {"instructions": {"message": "{{ unclosed"}, "mode": "clean"},
        ["instructions.message has an error with templating: unexpected end of template"],
    ),
    (
        "bad template in nested instructions",
        {"instructions": {"outer": {"list": ["ok", "{% endif %}"]}}, "mode": "clean"},
        ["instructions.outer.list.1 has an error with templating:"],
    ),
    (
        "unknown filter in instructions",
        {"instructions": {"message": "{{ x | no_such_filter }}"}, "mode": "clean"},
        ["instructions.message has an error with templating: No filter named 'no_such_filter'"],
    ),
    (
        "bad template in mode",
        {"instructions": {"message": "x"}, "mode": "{% if %}"},
        ["mode has an error with templating:"],
    ),
    (
        "matchers are no array",
        VALID_OPTIONS | {"matchers": {"regexp": "a", "path": "{{ a }}"}},
        ["matchers must be an array if present"],
    ),
    (
        "matcher is no hash",
        VALID_OPTIONS | {"matchers": ["regexp"]},
        ["each matcher must be a hash"],
    ),
    (
        "bad regexp",
        VALID_OPTIONS | {"matchers": [{"regexp": "(unclosed", "path": "{{ a }}"}]},
        ["bad regexp found in matchers: (unclosed"],
    ),
    (
        "missing regexp",
        VALID_OPTIONS | {"matchers": [{"path": "{{ a }}"}]},
        ["regexp is mandatory for a matcher and must be a string"],
    ),
    (
        "regexp is no string",
        VALID_OPTIONS | {"matchers": [{"regexp": 1, "path": "{{ a }}"}]},
        ["regexp is mandatory for a matcher and must be a string"],
    ),
    (
        "missing path",
        VALID_OPTIONS | {"matchers": [{"regexp": "a"}]},
        ["path is mandatory for a matcher and must be a string"],
    ),
    (
        "to is no string",
        VALID_OPTIONS | {"matchers": [{"regexp": "a", "path": "{{ a }}", "to": ["b"]}]},
        ["to must be a string if present in a matcher"],
    ),
    (
        "bad template in matcher path",
        VALID_OPTIONS | {"matchers": [{"regexp": "a", "path": "{{ a"}]},
        ["matchers.0.path has an error with templating:"],
    ),
    (
        "all errors are collected",
        {
            "instructions": {"message": "{{ unclosed"},
            "mode": "clean",
            "matchers": [{"regexp": "(unclosed"}, "regexp"],
        },
        [
            "instructions.message has an error with templating:",
            "bad regexp found in matchers: (unclosed",
            "path is mandatory for a matcher and must be a string",
            "each matcher must be a hash",
        ],
    ),
]


class TestValidateOptions:
    @pytest.mark.parametrize("testcase, options, expected", test_cases)
    def test_testcases(self, testcase, options, expected):
        errors = validate_options(options)
        assert len(errors) == len(expected), f"{testcase}: {errors}"
        for error, expected_error in zip(errors, expected):
            assert error.startswith(expected_error), testcase

    def test_valid_options_with_empty_to(self):
        options = VALID_OPTIONS | {"matchers": [{"regexp": "a", "path": "{{ a }}", "to": ""}]}
        assert not validate_options(options)


class TestMatcherErrors:
    @pytest.mark.parametrize("matchers", [None, []])
    def test_no_matchers_are_valid(self, matchers):
        assert not matcher_errors(matchers)

    def test_path_templates_are_only_checked_with_renderer(self):
        assert not matcher_errors([{"regexp": "a", "path": "{{ a"}])

    def test_matchers_validator_raises_all_errors(self):
        with pytest.raises(InvalidConfigurationErrors) as error:
            matchers_validator(None, None, [{"regexp": "(unclosed"}, "regexp"])
        assert [str(error) for error in error.value.errors] == [
            "bad regexp found in matchers: (unclosed",
            "path is mandatory for a matcher and must be a string",
            "each matcher must be a hash",
        ]

    def test_matchers_validator_accepts_valid_matchers(self):
        matchers_validator(None, None, VALID_OPTIONS["matchers"])
