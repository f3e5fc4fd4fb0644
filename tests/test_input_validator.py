import pytest

from ecampaign.errors import ValidationError
from ecampaign.security.input_validator import InputValidator


@pytest.fixture
def validator():
    return InputValidator()


def test_sanitize_string(validator):
    assert validator.sanitize_string('<script>alert("xss")</script>Hello') == 'Hello'
    assert validator.sanitize_string('<b>Bold</b> text') == 'Bold text'
    assert validator.sanitize_string('<img src=x onerror=alert(1)>Hi') == 'Hi'
    assert validator.sanitize_string('  Roads & water  ') == 'Roads & water'
    assert validator.sanitize_string('a' * 20, max_length=5) == 'aaaaa'
    with pytest.raises(ValidationError):
        validator.sanitize_string(42)


def test_require_fields(validator):
    assert validator.require_fields({'a': 1, 'b': 'x'}, ['a', 'b']) == [1, 'x']
    with pytest.raises(ValidationError, match="All fields are required"):
        validator.require_fields({'a': 1, 'b': '  '}, ['a', 'b'])
    with pytest.raises(ValidationError, match="Missing fields"):
        validator.require_fields({'a': 1}, ['a', 'b'], "Missing fields")
    with pytest.raises(ValidationError):
        validator.require_fields(['a'], ['a'])


def test_validate_email(validator):
    assert validator.validate_email('user@example.com')
    assert validator.validate_email('test.user+tag@domain.co.ke')
    assert not validator.validate_email('invalid.email')
    assert not validator.validate_email('@domain.com')
    assert not validator.validate_email(None)
    assert validator.normalize_email('  Alice@X.COM ') == 'alice@x.com'
    with pytest.raises(ValidationError, match="Invalid email address"):
        validator.normalize_email('nope')


def test_validate_username(validator):
    assert validator.validate_username('alice_w')
    assert validator.validate_username('j.doe-2')
    assert not validator.validate_username('a')
    assert not validator.validate_username('has space')


@pytest.mark.parametrize("value,expected", [(5, 5), ('12', 12), (3.0, 3)])
def test_validate_id(validator, value, expected):
    assert validator.validate_id(value) == expected


@pytest.mark.parametrize("value", [0, -1, 'abc', None, True, ''])
def test_validate_id_rejects(validator, value):
    with pytest.raises(ValidationError):
        validator.validate_id(value, 'user_id')


@pytest.mark.parametrize("value,expected", [(1, 1), (5, 5), ('3', 3), (4.0, 4)])
def test_validate_rating(validator, value, expected):
    assert validator.validate_rating(value) == expected


@pytest.mark.parametrize("value", [0, 6, 2.5, 'x', None, False])
def test_validate_rating_rejects(validator, value):
    with pytest.raises(ValidationError, match="Rating must be between 1 and 5"):
        validator.validate_rating(value)


def test_community_rules(validator):
    assert validator.violates_community_rules('I hate potholes')
    assert validator.violates_community_rules('TRIBE politics')
    assert not validator.violates_community_rules('Fix the roads')
    assert validator.clean_comment('  <i>Fix</i> the roads ') == 'Fix the roads'
    with pytest.raises(ValidationError, match="Comment violates community rules"):
        validator.clean_comment('what an idiot')
    with pytest.raises(ValidationError):
        validator.clean_comment('<b></b>')


@pytest.mark.parametrize("value", [2**31, 10**25, '99999999999999999999999', float('inf'), float('-inf'), float('nan')])
def test_validate_id_rejects_out_of_range(validator, value):
    with pytest.raises(ValidationError, match="Invalid ground_id"):
        validator.validate_id(value, 'ground_id')


def test_validate_id_upper_bound(validator):
    assert validator.validate_id(2**31 - 1) == 2**31 - 1


@pytest.mark.parametrize("text", ['ki<b></b>ll them', 'h<i>at</i>e', 'ki&#108;l', 'tr<span>ibe</span>'])
def test_banned_words_split_by_markup_are_caught(validator, text):
    with pytest.raises(ValidationError, match="Comment violates community rules"):
        validator.clean_comment(text)
