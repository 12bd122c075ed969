"""Placeholder substitution for notification text.

Templates reference values with ``$name``. Only names present in the
context are replaced; anything else is left exactly as written.
"""

import re
from typing import Dict, Union

FormatContext = Dict[str, Union[int, float, str]]


def build_context(charge_fraction: float) -> FormatContext:
    return {"percentage": int(round(charge_fraction * 100))}


def render(template: str, context: FormatContext) -> str:
    if not context:
        return template

    # Longest names first so "$percentage" wins over a shorter "$percent"
    names = sorted(context, key=len, reverse=True)
    pattern = re.compile(r"\$(" + "|".join(re.escape(name) for name in names) + ")")

    # Single pass, substituted values are never expanded again
    return pattern.sub(lambda m: str(context[m.group(1)]), template)
