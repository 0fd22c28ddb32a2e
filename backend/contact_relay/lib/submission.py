from typing import Any, Dict, Iterable, List

from pydantic import BaseModel, EmailStr, field_validator

# Same entity set as validator.js escape(), which form frontends tend to expect
_MARKUP_ENTITIES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
    "/": "&#x2F;",
    "\\": "&#x5C;",
    "`": "&#96;",
}


def escape_markup(text: str) -> str:
    return "".join(_MARKUP_ENTITIES.get(ch, ch) for ch in text)


def _require_encodable(value: str) -> str:
    # lone surrogates survive JSON decoding but cannot go into a message
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        raise ValueError("contains characters that cannot be encoded")
    return value


class Submission(BaseModel):
    """A contact-form submission that passed validation.

    ``name`` and ``message`` come out trimmed and HTML-escaped, ``email`` in
    the normalized form produced by email-validator (domain lower-cased).
    Only a bare address is accepted for ``email``, never ``Name <addr>``.
    """

    name: str
    email: EmailStr
    message: str

    @field_validator("email", mode="before")
    @classmethod
    def _bare_address(cls, value: Any) -> Any:
        if isinstance(value, str):
            if "<" in value or ">" in value:
                raise ValueError("value is not a valid email address")
            _require_encodable(value)
        return value

    @field_validator("name", "message")
    @classmethod
    def _trim_and_escape(cls, value: str) -> str:
        value = _require_encodable(value).strip()
        if not value:
            raise ValueError("must not be empty")
        return escape_markup(value)


def format_validation_errors(errors: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Flatten pydantic error entries into field/reason pairs.

    Positions that are not field names (a JSON decode error reports the
    character offset) collapse to the location, e.g. ``"body"``.
    """
    out: List[Dict[str, Any]] = []
    for err in errors:
        loc = list(err.get("loc", ()))
        location = str(loc[0]) if loc else "body"
        rest = loc[1:]
        while rest and not isinstance(rest[-1], str):
            rest.pop()
        field = ".".join(str(part) for part in rest) or location
        out.append({"field": field, "msg": err.get("msg", "Invalid value"), "location": location})
    return out
