# errfmt/internals/errors.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from errfmt.internals.report import Span, Reporter


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Category(str, Enum):
    GENERAL   = "general"
    SCHEMA    = "schema"
    TEMPLATE  = "template"
    FIELD     = "field"
    OUTPUT    = "output"
    INTERNAL  = "internal"


@dataclass(frozen=True)
class ErrorMessage:
    code: str
    severity: Severity
    text: str
    category: Category = Category.GENERAL
    doc: str = ""


REGISTRY: Dict[str, ErrorMessage] = {}

class _ErrorCatalog:
    def __init__(self, backing: Dict[str, ErrorMessage]) -> None:
        self._registry = backing

    def __getattr__(self, name: str) -> ErrorMessage:
        try:
            return self._registry[name]
        except KeyError as e:
            raise AttributeError(name) from e

    def __getitem__(self, code: str) -> ErrorMessage:
        return self._registry[code]


ERR = _ErrorCatalog(REGISTRY)

def emit(r: Reporter, em: ErrorMessage, span: Optional[Span], **kwargs) -> None:
    text = _fmt(em.code, **kwargs)
    if em.severity == Severity.ERROR:
        r.error(em.code, text, span)
    else:
        r.warn(em.code, text, span)

def raise_internal_error(code: str, **kwargs) -> None:
    """Raise a RuntimeError for internal errors.

    Internal errors (CE0xxx codes) indicate bugs in errfmt itself, such as the
    code generator meeting a schema the analyzer should have rejected.

    Raises:
        RuntimeError: Always raises with formatted error message
    """
    text = _fmt(code, **kwargs)
    raise RuntimeError(f"{code}: {text}")


#
# --- Helpers
#

def _add(msg: ErrorMessage) -> None:
    if msg.code in REGISTRY:
        raise ValueError(f"duplicate error code {REGISTRY[msg.code]} in {msg}")
    REGISTRY[msg.code] = msg

def _get(code: str) -> ErrorMessage:
    try:
        return REGISTRY[code]
    except KeyError:
        raise KeyError(f"unknown error code: {code}")

def _fmt(code: str, **kwargs) -> str:
    msg = _get(code)
    try:
        return msg.text.format(**kwargs)
    except KeyError as key_error:
        missing = key_error.args[0]
        raise KeyError(f"missing text key '{missing}' for {code} "
                       f"(needed by: {msg.text!r})") from None

#
# --- Registry population
#

# Internal errors - CE0xxx range
_add(ErrorMessage("CE0001", Severity.ERROR,
    "no field binding for key '{key}' in variant '{variant}'",
    Category.INTERNAL, "The code generator met a placeholder the field pass should have rejected."))

_add(ErrorMessage("CE0002", Severity.ERROR,
    "unknown field shape '{shape}'",
    Category.INTERNAL, "Variant field shape is not one of unit, unnamed or named."))

_add(ErrorMessage("CE0003", Severity.ERROR,
    "variant '{variant}' has no usable #[error] message",
    Category.INTERNAL, "Code generation ran on a schema that failed attribute checks."))

# General warnings
_add(ErrorMessage("CW0001", Severity.WARNING,
    "missing trailing newline", Category.GENERAL,
    "Source file should end with a newline character."))

# Schema errors - CE1xxx range
_add(ErrorMessage("CE1000", Severity.ERROR,
    "syntax error: {detail}",
    Category.SCHEMA, "The schema source does not match the errfmt grammar."))

_add(ErrorMessage("CE1001", Severity.ERROR,
    "'{name}' is a struct; display messages can only be derived for enums",
    Category.SCHEMA, "Only enum declarations carry per-variant #[error] messages."))

_add(ErrorMessage("CE1002", Severity.ERROR,
    "missing #[error(...)] attribute on variant '{variant}'",
    Category.SCHEMA, "Every variant needs a message, e.g. #[error(\"not found: {0}\")]."))

_add(ErrorMessage("CE1003", Severity.ERROR,
    "string literal expected in #[error(...)] attribute e.g. #[error(\"error message\")]",
    Category.SCHEMA, "The #[error] attribute takes exactly one string literal argument."))

_add(ErrorMessage("CE1004", Severity.ERROR,
    "duplicate variant '{variant}' in enum '{enum}' (first declared at {prev_loc})",
    Category.SCHEMA, "Variant names must be unique within an enum."))

_add(ErrorMessage("CE1005", Severity.ERROR,
    "duplicate enum '{name}' (first declared at {prev_loc})",
    Category.SCHEMA, "Enum names must be unique within a schema file."))

_add(ErrorMessage("CE1006", Severity.ERROR,
    "duplicate field '{field}' in variant '{variant}'",
    Category.SCHEMA, "Named fields must be unique within a variant."))

_add(ErrorMessage("CE1007", Severity.ERROR,
    "{kind} name '{name}' cannot be used as a Python name",
    Category.SCHEMA, "Enum and variant names become class names and attributes of the generated module, so Python keywords and names starting with '__' are rejected."))

_add(ErrorMessage("CW1001", Severity.WARNING,
    "duplicate #[error] attribute on variant '{variant}'; the first one is used",
    Category.SCHEMA, "Only one message can be attached to a variant."))

# Template errors - CE2xxx range
_add(ErrorMessage("CE2001", Severity.ERROR,
    "unterminated placeholder in message of variant '{variant}'",
    Category.TEMPLATE, "A '{' opens a placeholder that is never closed. Use '{{' for a literal brace."))

_add(ErrorMessage("CE2002", Severity.ERROR,
    "unmatched '}}' in message of variant '{variant}'",
    Category.TEMPLATE, "A single '}' appears outside of any placeholder. Use '}}' for a literal brace."))

_add(ErrorMessage("CE2003", Severity.ERROR,
    "variant '{variant}' has no fields but its message references '{key}'",
    Category.FIELD, "Unit variants can only use literal text."))

_add(ErrorMessage("CE2004", Severity.ERROR,
    "positional placeholder {index} out of range: variant '{variant}' has {count} field(s)",
    Category.FIELD, "Positional placeholders index the variant's unnamed fields from 0."))

_add(ErrorMessage("CE2005", Severity.ERROR,
    "variant '{variant}' has no field named '{key}'",
    Category.FIELD, "Named placeholders must match a field of the variant."))

_add(ErrorMessage("CE2006", Severity.ERROR,
    "positional placeholder in variant '{variant}' with named fields",
    Category.FIELD, "Variants with named fields must reference them by name."))

_add(ErrorMessage("CE2007", Severity.ERROR,
    "field name '{name}' in variant '{variant}' cannot be used as a Python attribute",
    Category.FIELD, "Named fields become parameters and attributes of the generated exception classes, so keywords, 'self', Exception attributes and names starting with '__' are rejected."))

_add(ErrorMessage("CW2001", Severity.WARNING,
    "field '{field}' of variant '{variant}' is never used in its message",
    Category.FIELD, "The field is carried by the variant but not displayed."))

_add(ErrorMessage("CE2008", Severity.ERROR,
    "unsupported format trait '{trait}' in message of variant '{variant}'",
    Category.TEMPLATE, "Traits follow the Rust format spec: [[fill]align][sign][#][0][width][.precision][type], with type one of ? x? X? x X o b e E p."))

# Output errors - CE3xxx range
_add(ErrorMessage("CE3001", Severity.ERROR,
    "cannot write output '{path}': {reason}",
    Category.OUTPUT, "The generated module could not be written."))
