# returnlint/policy.py
"""
Return-style policy and its configuration surface.

A :class:`Policy` is built once per run and shared read-only by every
analysis.  The fixed name sets below are always part of a policy; user
configuration can only add to them.

Configuration keys
------------------
``return_style``        ``"implicit"`` (default) or ``"explicit"``
``allow_implicit_else`` bool, default ``True``
``return_functions``    extra callees accepted as explicit exits
``except``              extra function names that are never checked
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, FrozenSet, Iterable, Mapping, Optional, Union

from returnlint.errors import PolicyError

logger = logging.getLogger(__name__)


class ReturnStyle(Enum):
    IMPLICIT = "implicit"
    EXPLICIT = "explicit"


BASE_RETURN_FUNCTIONS: FrozenSet[str] = frozenset({
    # Normal calls
    "return", "stop", "q", "quit",
    "invokeRestart", "tryInvokeRestart",
    # S3 dispatch
    "UseMethod", "NextMethod",
    # S4 dispatch
    "standardGeneric", "callNextMethod",
    # C interfaces
    ".C", ".Call", ".External", ".Fortran",
})

# Namespace hooks; their return value is never used.
SPECIAL_FUNCTIONS: FrozenSet[str] = frozenset({
    ".onLoad", ".onUnload", ".onAttach", ".onDetach",
    ".Last.lib", ".First", ".Last",
})

CONFIG_KEYS: FrozenSet[str] = frozenset({
    "return_style", "allow_implicit_else", "return_functions", "except",
})


def _parse_style(value: Union[str, ReturnStyle]) -> ReturnStyle:
    if isinstance(value, ReturnStyle):
        return value
    if isinstance(value, str):
        try:
            return ReturnStyle(value)
        except ValueError:
            pass
    raise PolicyError(
        f"Invalid return_style: {value!r}",
        key="return_style",
        value=value,
        hint="expected one of: "
        + ", ".join(repr(s.value) for s in ReturnStyle),
    )


def _name_set(key: str, names: Optional[Iterable[str]]) -> FrozenSet[str]:
    if names is None:
        return frozenset()
    if isinstance(names, (str, bytes)) or not isinstance(names, Iterable):
        raise PolicyError(
            f"{key} must be a list of function names, got {names!r}",
            key=key,
            value=names,
        )
    members = list(names)
    bad = [n for n in members if not isinstance(n, str) or not n]
    if bad:
        raise PolicyError(
            f"{key} must contain non-empty strings, got {bad!r}",
            key=key,
            value=names,
        )
    return frozenset(members)


@dataclass(frozen=True)
class Policy:
    """
    Immutable return-style policy.

    Attributes
    ----------
    style               : ReturnStyle
    allow_implicit_else : whether a terminal ``if`` may omit ``else``
    return_functions    : callees accepted as exits under explicit style
    except_functions    : function names whose bodies are not checked
    """
    style: ReturnStyle = ReturnStyle.IMPLICIT
    allow_implicit_else: bool = True
    return_functions: FrozenSet[str] = BASE_RETURN_FUNCTIONS
    except_functions: FrozenSet[str] = SPECIAL_FUNCTIONS

    def __post_init__(self) -> None:
        object.__setattr__(self, "style", _parse_style(self.style))
        if not isinstance(self.allow_implicit_else, bool):
            raise PolicyError(
                "allow_implicit_else must be a boolean, "
                f"got {self.allow_implicit_else!r}",
                key="allow_implicit_else",
                value=self.allow_implicit_else,
            )
        object.__setattr__(
            self,
            "return_functions",
            BASE_RETURN_FUNCTIONS
            | _name_set("return_functions", self.return_functions),
        )
        object.__setattr__(
            self,
            "except_functions",
            SPECIAL_FUNCTIONS | _name_set("except", self.except_functions),
        )

    @classmethod
    def build(
        cls,
        return_style: Union[str, ReturnStyle] = "implicit",
        allow_implicit_else: bool = True,
        return_functions: Optional[Iterable[str]] = None,
        except_: Optional[Iterable[str]] = None,
    ) -> Policy:
        """Keyword constructor mirroring the configuration keys."""
        return cls(
            style=_parse_style(return_style),
            allow_implicit_else=allow_implicit_else,
            return_functions=_name_set("return_functions", return_functions),
            except_functions=_name_set("except", except_),
        )

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> Policy:
        """Validate a configuration mapping and build a policy from it."""
        if not isinstance(config, Mapping):
            raise PolicyError(
                f"Policy configuration must be a mapping, got "
                f"{type(config).__name__}"
            )
        unknown = sorted(set(config) - CONFIG_KEYS)
        if unknown:
            raise PolicyError(
                f"Unknown configuration key(s): {', '.join(unknown)}",
                key=unknown[0],
                hint="valid keys: " + ", ".join(sorted(CONFIG_KEYS)),
            )
        return cls.build(
            return_style=config.get("return_style", "implicit"),
            allow_implicit_else=config.get("allow_implicit_else", True),
            return_functions=config.get("return_functions"),
            except_=config.get("except"),
        )

    @property
    def implicit(self) -> bool:
        return self.style is ReturnStyle.IMPLICIT

    @property
    def checks_exemptions(self) -> bool:
        """The ``except`` set is consulted only for these policies."""
        return self.style is ReturnStyle.EXPLICIT or not self.allow_implicit_else

    def is_exempt(self, name: Optional[str]) -> bool:
        return name is not None and name in self.except_functions

    def is_return_function(self, name: Optional[str]) -> bool:
        return name is not None and name in self.return_functions

    def to_config(self) -> dict:
        """Only the user-supplied names are written back out."""
        return {
            "return_style": self.style.value,
            "allow_implicit_else": self.allow_implicit_else,
            "return_functions": sorted(
                self.return_functions - BASE_RETURN_FUNCTIONS
            ),
            "except": sorted(self.except_functions - SPECIAL_FUNCTIONS),
        }


def load_policy(path: Union[str, Path]) -> Policy:
    """Read a JSON policy configuration file."""
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise PolicyError(f"Cannot read policy file {p}: {e}")
    try:
        config = json.loads(text)
    except json.JSONDecodeError as e:
        raise PolicyError(f"Invalid JSON in policy file {p}: {e}")
    policy = Policy.from_config(config)
    logger.debug("Loaded policy from %s: %s", p, policy.to_config())
    return policy
