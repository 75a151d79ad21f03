"""
PII Redactor.

Strips regulated PII from customer text before anything is matched, scored
or returned. Redaction runs ahead of analysis, so theme matching sees
already-redacted text: "billing" still matches, "jane@example.com" is gone.

Categories (applied in this order):
    ssn          123-45-6789, 123 45 6789
    credit_card  13-19 digits, optionally in 4-digit groups, Luhn-validated
    email        local@domain.tld
    phone        US formats, optional +1 and parenthesized area code

Names, postal addresses and business identifiers (order IDs, account
numbers) are left alone.

Matched spans are replaced with a category placeholder rather than removed
so sentence structure survives for keyword matching. Placeholders contain
no digits and no "@", so redacting twice is a no-op. Only category names are
ever reported; the matched substrings are never logged or returned.
"""

import re
from dataclasses import dataclass, replace
from typing import FrozenSet, Iterable, List, Tuple

from .records import FeatureComment, FeatureRequestRecord, TicketRecord

# Category names reported back to callers for the audit trail
SSN = "ssn"
CREDIT_CARD = "credit_card"
EMAIL = "email"
PHONE = "phone"

PII_CATEGORIES = (SSN, CREDIT_CARD, EMAIL, PHONE)

PLACEHOLDERS = {
    SSN: "[SSN REDACTED]",
    CREDIT_CARD: "[CC REDACTED]",
    EMAIL: "[EMAIL REDACTED]",
    PHONE: "[PHONE REDACTED]",
}

# Replacement for the structured customer-identity field
CUSTOMER_EMAIL_PLACEHOLDER = "[REDACTED]"

SSN_PATTERN = re.compile(r"\b\d{3}[- ]\d{2}[- ]\d{4}\b")
CREDIT_CARD_PATTERN = re.compile(r"\b(?:\d{4}[- ]?){2,4}\d{1,4}\b")
EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+\-]+@[A-Za-z0-9.\-]+\.[A-Za-z]{2,}\b")
# Digit lookarounds keep the pattern from biting 10 digits out of a longer run
PHONE_PATTERN = re.compile(
    r"(?<!\d)(?:\+?1[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}(?!\d)"
)

CARD_MIN_DIGITS = 13
CARD_MAX_DIGITS = 19


@dataclass(frozen=True)
class RedactionResult:
    """Redacted text plus the PII categories that were replaced."""

    text: str
    categories: FrozenSet[str]


def passes_luhn(digits: str) -> bool:
    """Luhn checksum over a string of digits."""
    if not digits or not digits.isdigit():
        return False

    total = 0
    for position, char in enumerate(reversed(digits)):
        n = int(char)
        if position % 2 == 1:
            n *= 2
            if n > 9:
                n -= 9
        total += n
    return total % 10 == 0


def _redact_cards(text: str) -> Tuple[str, bool]:
    found = False

    def _replace(match: re.Match) -> str:
        nonlocal found
        digits = re.sub(r"\D", "", match.group(0))
        if CARD_MIN_DIGITS <= len(digits) <= CARD_MAX_DIGITS and passes_luhn(digits):
            found = True
            return PLACEHOLDERS[CREDIT_CARD]
        return match.group(0)

    return CREDIT_CARD_PATTERN.sub(_replace, text), found


def redact(text: str) -> RedactionResult:
    """
    Replace PII in a piece of text.

    Args:
        text: Free text (None is treated as empty)

    Returns:
        RedactionResult with the redacted text and the categories touched
    """
    if not text:
        return RedactionResult(text="", categories=frozenset())

    found = set()

    text, count = SSN_PATTERN.subn(PLACEHOLDERS[SSN], text)
    if count:
        found.add(SSN)

    text, card_found = _redact_cards(text)
    if card_found:
        found.add(CREDIT_CARD)

    text, count = EMAIL_PATTERN.subn(PLACEHOLDERS[EMAIL], text)
    if count:
        found.add(EMAIL)

    text, count = PHONE_PATTERN.subn(PLACEHOLDERS[PHONE], text)
    if count:
        found.add(PHONE)

    return RedactionResult(text=text, categories=frozenset(found))


def redact_all(texts: Iterable[str]) -> Tuple[List[str], FrozenSet[str]]:
    """Redact a sequence of strings, unioning the categories found."""
    redacted = []
    categories = set()
    for text in texts:
        result = redact(text)
        redacted.append(result.text)
        categories |= result.categories
    return redacted, frozenset(categories)


def redact_ticket(record: TicketRecord) -> Tuple[TicketRecord, FrozenSet[str]]:
    """
    Redact every free-text field of a support ticket.

    The customer_email field is replaced unconditionally, whether or not the
    email pattern would have caught it.

    Returns:
        (redacted copy, categories found)
    """
    subject = redact(record.subject)
    preview = redact(record.preview)
    messages, message_categories = redact_all(record.customer_messages)

    categories = subject.categories | preview.categories | message_categories
    redacted = replace(
        record,
        subject=subject.text,
        preview=preview.text,
        customer_messages=messages,
        customer_email=CUSTOMER_EMAIL_PLACEHOLDER,
    )
    return redacted, frozenset(categories)


def redact_feature_request(
    record: FeatureRequestRecord,
) -> Tuple[FeatureRequestRecord, FrozenSet[str]]:
    """
    Redact title, description and comment text of a feature-board post.

    Returns:
        (redacted copy, categories found)
    """
    title = redact(record.title)
    description = redact(record.description)

    categories = set(title.categories | description.categories)
    comments: List[FeatureComment] = []
    for comment in record.comments:
        result = redact(comment.comment)
        categories |= result.categories
        comments.append(replace(comment, comment=result.text))

    redacted = replace(
        record,
        title=title.text,
        description=description.text,
        comments=comments,
    )
    return redacted, frozenset(categories)
