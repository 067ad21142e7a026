"""Tests for result model invariants."""

import pytest
from pydantic import ValidationError

from askdown.models import (Button, ButtonsMultiSelect, ButtonsOnly,
                            ErrorResult, InteractionType, NonAssignmentButton,
                            RemarkCompatibleResult, TextOnly)


class TestVariantInvariants:
    """Variants cannot be built in an inconsistent state."""

    def test_multi_select_flag_is_fixed(self):
        with pytest.raises(ValidationError):
            ButtonsOnly(variable="v", buttons=[Button(display="A", value="A")], is_multi_select=True)
        with pytest.raises(ValidationError):
            ButtonsMultiSelect(
                variable="v", buttons=[Button(display="A", value="A")], is_multi_select=False
            )

    def test_button_variants_need_buttons(self):
        with pytest.raises(ValidationError):
            ButtonsOnly(variable="v", buttons=[])
        with pytest.raises(ValidationError):
            NonAssignmentButton(buttons=[])

    def test_variable_must_not_be_empty(self):
        with pytest.raises(ValidationError):
            TextOnly(variable="", question="q")

    def test_unknown_fields_rejected(self):
        with pytest.raises(ValidationError):
            TextOnly(variable="v", question="q", buttons=[])

    def test_results_are_frozen(self):
        result = TextOnly(variable="v", question="q")
        with pytest.raises(ValidationError):
            result.question = "changed"

    def test_buttons_are_tuples(self):
        result = NonAssignmentButton(buttons=[Button(display="A", value="a")])
        assert isinstance(result.buttons, tuple)

    def test_type_tags(self):
        assert ButtonsMultiSelect(
            variable="v", buttons=[Button(display="A", value="A")]
        ).type == InteractionType.BUTTONS_MULTI_SELECT
        assert ErrorResult(message="bad").type is None


class TestButton:
    def test_str_shows_value_when_different(self):
        assert str(Button(display="Red", value="r")) == "Red(r)"
        assert str(Button(display="Red", value="Red")) == "Red"


class TestRemarkCompatibleResult:
    def test_to_dict_uses_camel_case_and_omits_missing(self):
        remark = RemarkCompatibleResult(variable_name="v", is_multi_select=True)
        assert remark.to_dict() == {"variableName": "v", "isMultiSelect": True}

    def test_accepts_camel_case_keys(self):
        remark = RemarkCompatibleResult.model_validate({"buttonTexts": ["A"], "buttonValues": ["a"]})
        assert remark.button_texts == ["A"]
        assert remark.button_values == ["a"]

    def test_from_text_only(self):
        remark = RemarkCompatibleResult.from_result(TextOnly(variable="v", question=""))
        assert remark.to_dict() == {"variableName": "v", "placeholder": ""}
