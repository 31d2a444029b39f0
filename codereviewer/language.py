"""Best-effort language detection for the code editor.

Detection is a plain substring heuristic. Rules are evaluated top to bottom
and the first match wins; when no rule matches the caller's current language
is kept, so typing does not keep resetting a manually chosen language.
"""

from typing import Callable, List, Optional, Tuple

DEFAULT_LANGUAGE = "javascript"

# Languages offered by the editor's language selector
SUPPORTED_LANGUAGES: Tuple[str, ...] = (
    "javascript",
    "typescript",
    "jsx",
    "tsx",
    "css",
    "python",
    "java",
    "c",
    "cpp",
    "php",
)

LANGUAGE_LABELS = {
    "javascript": "JavaScript",
    "typescript": "TypeScript",
    "jsx": "JSX/React",
    "tsx": "TSX",
    "css": "CSS",
    "python": "Python",
    "java": "Java",
    "c": "C",
    "cpp": "C++",
    "php": "PHP",
}

Predicate = Callable[[str], bool]


def _contains_any(*markers: str) -> Predicate:
    def predicate(code: str) -> bool:
        return any(marker in code for marker in markers)
    return predicate


def _looks_like_python(code: str) -> bool:
    return "def " in code and ":" in code and "{" not in code


# Order matters: earlier rules take priority.
LANGUAGE_RULES: List[Tuple[Predicate, str]] = [
    (_contains_any("<?php"), "php"),
    (_contains_any("import React", "className=", "jsx"), "jsx"),
    (_contains_any("<template>", "export default {"), "javascript"),  # Vue
    (_looks_like_python, "python"),
    (_contains_any("public class ", "private void"), "java"),
    (_contains_any("using namespace", "std::"), "cpp"),
    (_contains_any("@import", "@media", "@keyframes"), "css"),
    (_contains_any("interface ", "type ", ": string"), "typescript"),
]


def match_language(code: str) -> Optional[str]:
    """Return the tag of the first rule matching ``code``, or None."""
    for predicate, tag in LANGUAGE_RULES:
        if predicate(code):
            return tag
    return None


def detect_language(code: str, previous: str = DEFAULT_LANGUAGE) -> str:
    """Detect the language of ``code``, keeping ``previous`` when nothing matches."""
    return match_language(code) or previous
