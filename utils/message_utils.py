"""
utils/message_utils.py

Purpose: Localized reply rendering

- Renders named-placeholder templates for a language
- Validates that all languages define the same keys and placeholders
- Text folding (case and Polish diacritics) for keyword matching
"""

import unicodedata
from string import Formatter
from typing import Dict, Iterable, List, Mapping, Set

from app.core.exceptions import ConfigurationError

# Letters that do not decompose under NFKD
_EXTRA_FOLDS = str.maketrans({"ł": "l", "Ł": "l", "đ": "d", "ø": "o"})


def fold_text(text: str) -> str:
    """
    Lowercases and strips diacritics: "Pomóż" -> "pomoz", "Język" -> "jezyk".
    """
    if not text:
        return ""
    text = text.translate(_EXTRA_FOLDS).lower()
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(char for char in decomposed if not unicodedata.combining(char))


def contains_any(folded_text: str, keywords: Iterable[str]) -> bool:
    """Substring match of any (already folded) keyword."""
    return any(keyword in folded_text for keyword in keywords)


def template_fields(template: str) -> Set[str]:
    """Returns the named placeholders used in a template."""
    fields = set()
    for _, field_name, _, _ in Formatter().parse(template):
        if field_name is None:
            continue
        if field_name == "" or field_name.isdigit():
            raise ConfigurationError(
                "Templates must use named placeholders",
                details={"template": template}
            )
        fields.add(field_name)
    return fields


def validate_templates(name: str, templates: Mapping[str, Mapping[str, str]]) -> bool:
    """
    Checks that every language defines the same keys with the same placeholders.

    Args:
        name: Template group name (for error messages)
        templates: language -> key -> template

    Raises:
        ConfigurationError: On any inconsistency
    """
    problems: List[str] = []
    languages = list(templates)
    if not languages:
        raise ConfigurationError(f"Template group '{name}' is empty")

    reference_language = languages[0]
    reference = templates[reference_language]

    for language in languages[1:]:
        current = templates[language]
        for key in set(reference) ^ set(current):
            problems.append(f"key '{key}' missing in one of {reference_language}/{language}")
        for key in set(reference) & set(current):
            expected = template_fields(reference[key])
            found = template_fields(current[key])
            if expected != found:
                problems.append(
                    f"'{key}' placeholders differ: {reference_language}={sorted(expected)} "
                    f"{language}={sorted(found)}"
                )

    if problems:
        raise ConfigurationError(
            f"Template group '{name}' is inconsistent",
            details=sorted(problems)
        )
    return True


def render(templates: Mapping[str, Mapping[str, str]], language: str, key: str, **values) -> str:
    """
    Renders a template for a language.

    Args:
        templates: language -> key -> template
        language: Language code
        key: Message key
        **values: Placeholder values

    Returns:
        Rendered message
    """
    template = templates[language][key]
    return template.format(**values)


def merge_keywords(defaults: Mapping[str, Iterable[str]], overrides: Mapping[str, Iterable[str]]) -> Dict[str, tuple]:
    """Folds keyword groups, letting a persona replace individual groups."""
    merged = dict(defaults)
    merged.update(overrides or {})
    return {group: tuple(fold_text(word) for word in words) for group, words in merged.items()}
