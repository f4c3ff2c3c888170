from hirelog.models import User
from hirelog.services.notes import detect_mentions, insert_mention, mention_query, suggest_mentions

USERS = [
    User(uid="u-al", name="Al", email="al@example.com"),
    User(uid="u-alice", name="Alice", email="alice@example.com"),
    User(uid="u-ann", name="Ann", email="ann@example.com"),
    User(uid="u-annlee", name="Ann Lee", email="annlee@example.com"),
    User(uid="u-jordan", name="jordan", email="jordan@example.com"),
]


def test_exact_name_is_mentioned():
    assert detect_mentions("Hi @Alice, please review", USERS) == ["u-alice"]


def test_shorter_name_inside_longer_one_is_not_mentioned():
    assert detect_mentions("@Alice ping", USERS) == ["u-alice"]


def test_longest_name_wins_at_same_position():
    assert detect_mentions("cc @Ann Lee", USERS) == ["u-annlee"]
    assert detect_mentions("cc @Ann and @Al", USERS) == ["u-ann", "u-al"]


def test_mentions_are_case_sensitive_and_need_a_boundary():
    assert detect_mentions("@alice @Alicia", USERS) == []
    assert detect_mentions("mail bob@Alice.com", USERS) == []


def test_each_user_is_listed_once():
    assert detect_mentions("@jordan and again @jordan", USERS) == ["u-jordan"]


def test_mention_query_before_cursor():
    assert mention_query("Hello @jo") == "jo"
    assert mention_query("@") == ""
    assert mention_query("Hi @jo and more", cursor=6) == "jo"


def test_no_mention_query_after_space_or_inside_word():
    assert mention_query("Hello @jo ") is None
    assert mention_query("mail@jo") is None
    assert mention_query("plain text") is None


def test_suggestions_filter_case_insensitively():
    names = [user.name for user in suggest_mentions(USERS, "AN")]
    assert names == ["Ann", "Ann Lee", "jordan"]
    assert len(suggest_mentions(USERS, "")) == len(USERS)


def test_insert_mention_replaces_partial_token():
    assert insert_mention("Hi @jo", None, "jordan") == ("Hi @jordan ", 11)


def test_insert_mention_keeps_text_after_cursor():
    text, cursor = insert_mention("Hi @jo rest", 6, "jordan")
    assert text == "Hi @jordan  rest"
    assert cursor == 11


def test_insert_mention_without_partial_token_is_noop():
    assert insert_mention("Hi there", None, "jordan") == ("Hi there", 8)


def test_newline_before_cursor_ends_the_mention():
    assert mention_query("hi @al\n") is None
    assert insert_mention("hi @al\n", None, "alice") == ("hi @al\n", 7)
