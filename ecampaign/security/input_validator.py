# ecampaign/security/input_validator.py

import re
import html
import bleach

from ecampaign.errors import ValidationError

# Input validation and sanitization for request bodies: required fields,
# identifiers, emails, free text and the community content filter.

BANNED_WORDS = ('kill', 'hate', 'tribe', 'idiot')

# primary keys are 32-bit INTEGER columns
MAX_ID = 2**31 - 1


class InputValidator:
    def __init__(self, banned_words=BANNED_WORDS):
        self.allowed_html_tags = []
        self.allowed_html_attributes = {}
        self.banned_words = tuple(w.lower() for w in banned_words)

        self.patterns = {
            'email': re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'),
            'username': re.compile(r'^[\w.-]{2,80}$'),
            'xss_script': re.compile(r'<script[^>]*>.*?</script>', re.IGNORECASE | re.DOTALL),
            'xss_event': re.compile(r'\bon\w+\s*=', re.IGNORECASE)
        }

    def sanitize_string(self, input_str, max_length=5000):
        if not isinstance(input_str, str):
            raise ValidationError("Input must be a string")
        if len(input_str) > max_length:
            input_str = input_str[:max_length]

        sanitized = re.sub(self.patterns['xss_script'], '', input_str)
        sanitized = re.sub(self.patterns['xss_event'], '', sanitized)
        sanitized = bleach.clean(sanitized, tags=self.allowed_html_tags,
                                 attributes=self.allowed_html_attributes, strip=True)
        # bleach escapes &, < and >; store the plain text and let the client escape on render
        return html.unescape(sanitized).strip()

    def require_fields(self, data, fields, message="All fields are required"):
        """Return the values of `fields` from `data`, failing if any is missing or blank."""
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        values = []
        for field in fields:
            value = data.get(field)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise ValidationError(message)
            values.append(value)
        return values

    def validate_email(self, email):
        return isinstance(email, str) and bool(self.patterns['email'].match(email))

    def normalize_email(self, email):
        if not isinstance(email, str):
            raise ValidationError("Invalid email address")
        email = email.strip().lower()
        if not self.validate_email(email):
            raise ValidationError("Invalid email address")
        return email

    def validate_password(self, password):
        if not isinstance(password, str) or not password:
            raise ValidationError("Password is required")
        return password

    def validate_username(self, username):
        return isinstance(username, str) and bool(self.patterns['username'].match(username))

    def validate_id(self, value, name='id'):
        if isinstance(value, bool):
            raise ValidationError(f"Invalid {name}")
        try:
            ident = int(value)
        except (TypeError, ValueError, OverflowError):
            raise ValidationError(f"Invalid {name}")
        if ident <= 0 or ident > MAX_ID:
            raise ValidationError(f"Invalid {name}")
        return ident

    def validate_rating(self, value):
        if isinstance(value, bool):
            raise ValidationError("Rating must be between 1 and 5")
        try:
            rating = float(value)
        except (TypeError, ValueError):
            raise ValidationError("Rating must be between 1 and 5")
        if not rating.is_integer() or rating < 1 or rating > 5:
            raise ValidationError("Rating must be between 1 and 5")
        return int(rating)

    def violates_community_rules(self, text):
        lowered = (text or '').lower()
        return any(word in lowered for word in self.banned_words)

    def clean_comment(self, text):
        """Sanitize a comment and reject it outright if it contains a banned word.

        Both the raw and the sanitized text are checked: stripping markup or
        decoding entities can join a banned word back together.
        """
        cleaned = self.sanitize_string(text)
        if self.violates_community_rules(text) or self.violates_community_rules(cleaned):
            raise ValidationError("Comment violates community rules")
        if not cleaned:
            raise ValidationError("Comment cannot be empty")
        return cleaned
