import pytest

from app.core.exceptions import ConfigurationError
from app.main import validate_all_templates
from utils.constants import COMMAND_MESSAGES, KRETES_MESSAGES, REXOR_MESSAGES
from utils.message_utils import fold_text, render, template_fields, validate_templates


def test_shipped_templates_are_consistent():
    validate_all_templates()


@pytest.mark.parametrize("templates", [KRETES_MESSAGES, REXOR_MESSAGES])
def test_persona_templates_cover_both_languages(templates):
    assert set(templates) == {"pl", "en"}
    assert set(templates["pl"]) == set(templates["en"])


def test_missing_key_detected():
    templates = {"pl": {"a": "x", "b": "y"}, "en": {"a": "x"}}
    with pytest.raises(ConfigurationError) as info:
        validate_templates("broken", templates)
    assert "'b'" in info.value.details[0]


def test_placeholder_mismatch_detected():
    templates = {"pl": {"solved": "Brawo po {attempts} próbach"}, "en": {"solved": "Well done"}}
    with pytest.raises(ConfigurationError):
        validate_templates("broken", templates)


def test_positional_placeholders_rejected():
    with pytest.raises(ConfigurationError):
        template_fields("attempt {}")


def test_render():
    assert render(COMMAND_MESSAGES, "en", "not_authorized") == "You are not authorized to use this command."
    assert render({"pl": {"k": "{n} prób"}}, "pl", "k", n=3, unused=1) == "3 prób"


@pytest.mark.parametrize(
    "text, folded",
    [
        ("Pomóż", "pomoz"),
        ("JĘZYK", "jezyk"),
        ("Usuń moje dane", "usun moje dane"),
        ("Łódź źdźbło", "lodz zdzblo"),
        ("", ""),
    ],
)
def test_fold_text(text, folded):
    assert fold_text(text) == folded
