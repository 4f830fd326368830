"""Query-parameter substitution into command templates.

A parameter named ``$name`` replaces every literal occurrence of
``$name`` in the template with its value. Replacement is plain text, not
shell-aware: the validation pattern is the only check applied to values.
"""

from __future__ import annotations

import logging
import re
from typing import Mapping, Sequence

from spuria.errors import SubstitutionError

logger = logging.getLogger(__name__)

PLACEHOLDER_PREFIX = "$"


class ParameterSubstitutor:
    """Validates query parameters and injects them into a template.

    Args:
        pattern: Compiled pattern every value must match in full.
        continue_on_error: Skip invalid parameters (leaving their
            placeholder in place) instead of raising.
    """

    def __init__(self, pattern: re.Pattern[str], continue_on_error: bool = False) -> None:
        self._pattern = pattern
        self._continue_on_error = continue_on_error

    def substitute(
        self,
        template: str,
        params: Mapping[str, Sequence[str]],
        path: str = "",
    ) -> str:
        """Return ``template`` with valid parameters substituted.

        Parameters are applied in mapping order, so a value that itself
        contains a later parameter's placeholder is substituted again.

        Raises:
            SubstitutionError: On the first invalid parameter, unless
                ``continue_on_error`` is set.
        """
        command = template
        for name, values in params.items():
            try:
                value = self._validate(name, values)
            except SubstitutionError as e:
                logger.warning(
                    "get param error, %s (path=%s name=%s reason=%s)", e, path, name, e.reason
                )
                if self._continue_on_error:
                    continue
                raise
            command = command.replace(name, value)
        return command

    def _validate(self, name: str, values: Sequence[str]) -> str:
        if len(values) != 1:
            raise SubstitutionError(
                f"GET param must have exactly 1 value, got {len(values)}", "arity", name
            )
        if not name.startswith(PLACEHOLDER_PREFIX):
            raise SubstitutionError(
                f"GET param name doesn't begin with {PLACEHOLDER_PREFIX}", "prefix", name
            )
        value = values[0]
        if self._pattern.fullmatch(value) is None:
            raise SubstitutionError("GET param value doesn't match regex", "pattern", name)
        return value
