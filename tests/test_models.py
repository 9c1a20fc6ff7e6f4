"""Test data models, edit operation and run invariants."""

import pytest
from pydantic import ValidationError

from qa_casegen.exceptions import InvalidEditError, RunNotFoundError
from qa_casegen.models import (
    Category,
    OutputFormat,
    ParsedOutput,
    Priority,
    Provider,
    ProviderResult,
    ProviderStatus,
    Run,
    TestCase,
    validate_unique_ids
)
from qa_casegen.nodes.aggregator import aggregate


class TestTestCase:
    """Test TestCase model validation and mutability rules."""

    def test_empty_steps_fail(self):
        """Test that a case needs at least one step."""
        with pytest.raises(ValidationError, match="at least one step"):
            TestCase(id="tc-1", title="A", steps=[], format=OutputFormat.GHERKIN)

    def test_defaults(self):
        """Test default priority and expected result."""
        case = TestCase(id="tc-1", title="A", steps=["Given a"], format=OutputFormat.GHERKIN)

        assert case.priority == Priority.NA
        assert case.expected_result == ""

    @pytest.mark.parametrize("field,value", [
        ("id", "tc-2"),
        ("title", "B"),
        ("priority", Priority.HIGH),
        ("expected_result", "x"),
        ("format", OutputFormat.PLAIN),
    ])
    def test_fields_other_than_steps_are_frozen(self, make_case, field, value):
        """Test that only steps can be assigned."""
        case = make_case()

        with pytest.raises(ValidationError):
            setattr(case, field, value)

    def test_replace_steps(self, make_case):
        """Test replacing steps, dropping blank lines."""
        case = make_case()

        case.replace_steps(["Given a cart", "", "  Then an error is shown  "])

        assert case.steps == ["Given a cart", "Then an error is shown"]

    def test_replace_steps_rejects_empty(self, make_case):
        """Test that an all-blank edit leaves the steps untouched."""
        case = make_case()

        with pytest.raises(InvalidEditError):
            case.replace_steps(["", "   "])
        assert case.steps == ["Given a user", "When they log in", "Then success"]

    def test_category_recomputed_after_edit(self, make_case):
        """Test that the category follows edited steps."""
        case = make_case()
        assert case.category == Category.POSITIVE

        case.replace_steps(["Given an empty cart"])

        assert case.category == Category.EDGE

    def test_category_not_serialized(self, make_case):
        """Test that the category is not stored."""
        assert "category" not in make_case().model_dump()


class TestRun:
    """Test Run invariants and the edit operation."""

    def test_run_is_frozen(self):
        """Test that run attributes cannot be reassigned."""
        run = aggregate({}, requested=[Provider.OPENAI])

        with pytest.raises(ValidationError):
            run.description = "changed"

    def test_nested_results_cannot_be_changed_in_place(self, make_case):
        """Provider results, case lists and the requested order stay as created."""
        run = aggregate(
            {Provider.OPENAI: ParsedOutput(cases=[make_case()], summary="s")},
            requested=[Provider.OPENAI]
        )

        with pytest.raises(ValidationError):
            run.results[Provider.OPENAI].summary = "tampered"
        with pytest.raises(TypeError):
            run.results[Provider.GEMINI] = ProviderResult(provider=Provider.GEMINI)
        with pytest.raises(AttributeError):
            run.results[Provider.OPENAI].cases.clear()
        with pytest.raises(AttributeError):
            run.requested.append(Provider.GEMINI)

        assert run.summary_for(Provider.OPENAI) == "s"
        assert len(run.cases_for(Provider.OPENAI)) == 1
        assert run.status(Provider.GEMINI) == ProviderStatus.NOT_REQUESTED

    def test_results_must_be_requested(self, make_case):
        """Test that results need a requested provider."""
        with pytest.raises(ValidationError, match="not requested"):
            Run(
                requested=[Provider.OPENAI],
                results={Provider.CLAUDE: ProviderResult(provider=Provider.CLAUDE)}
            )

    def test_duplicate_case_ids_rejected(self, make_case):
        """Test that case ids are unique across a run."""
        case = make_case()

        with pytest.raises(ValidationError, match="Duplicate IDs"):
            Run(
                requested=[Provider.OPENAI, Provider.CLAUDE],
                results={
                    Provider.OPENAI: ProviderResult(provider=Provider.OPENAI, cases=[case]),
                    Provider.CLAUDE: ProviderResult(provider=Provider.CLAUDE, cases=[case]),
                }
            )

    def test_edit_steps_in_place(self, make_case):
        """Test editing a case through its run."""
        case = make_case()
        run = aggregate({Provider.OPENAI: ParsedOutput(cases=[case])})

        edited = run.edit_steps(case.id, ["Given edited", "Then done"])

        assert edited is case
        assert run.cases_for(Provider.OPENAI)[0].steps == ["Given edited", "Then done"]

    def test_edit_last_write_wins(self, make_case):
        """Test that the last edit wins."""
        case = make_case()
        run = aggregate({Provider.OPENAI: ParsedOutput(cases=[case])})

        run.edit_steps(case.id, ["first"])
        run.edit_steps(case.id, ["second"])

        assert case.steps == ["second"]

    def test_find_unknown_case(self):
        """Test looking up a case that does not exist."""
        run = aggregate({}, requested=[])

        with pytest.raises(RunNotFoundError):
            run.find_case("missing")

    def test_json_round_trip_keeps_provider_keys(self, make_case):
        """Test that JSON keeps provider keys and request order."""
        run = aggregate({Provider.GEMINI: ParsedOutput(cases=[make_case()], summary="S")})

        restored = Run.model_validate_json(run.model_dump_json())

        assert restored.requested == (Provider.GEMINI,)
        assert restored.summary_for(Provider.GEMINI) == "S"
        assert restored.cases_for(Provider.GEMINI)[0].id == run.cases_for(Provider.GEMINI)[0].id


class TestHelpers:
    """Test model helpers."""

    def test_provider_display_names(self):
        """Test provider display names."""
        assert [p.display_name for p in Provider] == ["OpenAI", "Gemini", "Claude"]

    def test_validate_unique_ids(self, make_case):
        """Test duplicate id detection."""
        case = make_case()

        validate_unique_ids([case, make_case()])
        with pytest.raises(ValueError, match="Duplicate IDs"):
            validate_unique_ids([case, case])
