import pytest

from shared.chat.intent import (
    QueryIntent,
    active_sources,
    detect_intent,
    detect_language,
    latest_user_query,
    match_keywords,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "text, language",
    [
        ("सोने का भाव क्या है", "hindi"),
        ("سونے کی قیمت کیا ہے", "urdu"),
        ("kya hai yeh", "hinglish"),
        ("Aaj market kaisa hai?", "hinglish"),
        ("what is this", "english"),
        ("", "english"),
    ],
)
def test_detect_language(text, language):
    assert detect_language(text) == language


@pytest.mark.unit
def test_devanagari_wins_over_hinglish_words():
    assert detect_language("yeh सोना kya hai") == "hindi"


@pytest.mark.unit
def test_hinglish_requires_whole_words():
    # "kabab" and "sekond" contain "kab"/"se" but are not Hinglish tokens
    assert detect_language("kabab sekond") == "english"


@pytest.mark.unit
def test_match_keywords_is_case_insensitive_substring():
    matches = match_keywords("What is the GOLD RATE and latest NIFTY level?")
    assert matches == {"stock": True, "gold": True, "news": True, "politics": False}


@pytest.mark.unit
def test_strict_mode_ignores_keywords():
    intent = detect_intent("What is today's gold price and stock market news?")
    assert intent == QueryIntent(detected_language="english")
    assert intent.needs_rag is True
    assert intent.needs_live_data is False


@pytest.mark.unit
def test_live_mode_honours_keywords():
    intent = detect_intent("election news and gold price", live_data=True)
    assert intent.needs_gold_data
    assert intent.needs_news_data
    assert intent.needs_politics_data
    assert not intent.needs_stock_data
    assert intent.needs_live_data
    assert active_sources(intent) == ["gold", "news", "politics"]


@pytest.mark.unit
def test_as_dict_uses_wire_names():
    intent = QueryIntent(needs_gold_data=True, detected_language="urdu")
    assert intent.as_dict() == {
        "needsStockData": False,
        "needsGoldData": True,
        "needsNewsData": False,
        "needsPoliticsData": False,
        "needsRAG": True,
        "detectedLanguage": "urdu",
    }


@pytest.mark.unit
def test_latest_user_query_skips_assistant_turns():
    messages = [
        {"role": "user", "content": "first"},
        {"role": "assistant", "content": "reply"},
        {"role": "user", "content": "second"},
        {"role": "assistant", "content": "another reply"},
    ]
    assert latest_user_query(messages) == "second"


@pytest.mark.unit
def test_latest_user_query_empty():
    assert latest_user_query([]) == ""
    assert latest_user_query(None) == ""
    assert latest_user_query([{"role": "user", "content": [{"type": "text"}]}]) == ""
