import pytest

from shared.chat.prompts import (
    DOCUMENT_EXCERPT_LIMIT,
    NO_INFO_MESSAGE,
    build_document_context,
    build_system_prompt,
    has_document_content,
    language_instruction,
    resolve_language,
)


@pytest.mark.unit
class TestResolveLanguage:
    def test_explicit_preference_wins(self):
        assert resolve_language("urdu", "english") == "urdu"

    @pytest.mark.parametrize("preference", [None, "", "auto"])
    def test_auto_falls_back_to_detection(self, preference):
        assert resolve_language(preference, "hinglish") == "hinglish"

    def test_unknown_language_gets_english_instruction(self):
        assert language_instruction("klingon") == "Respond in English."


@pytest.mark.unit
class TestDocumentContext:
    def test_empty(self):
        assert build_document_context([]) == ""
        assert build_document_context(None) == ""

    def test_documents_are_numbered_by_position(self):
        context = build_document_context(
            [
                {"name": "a.txt", "content": "alpha"},
                {"name": "empty.pdf", "content": None},
                {"name": "c.txt", "content": "gamma"},
            ]
        )
        assert context.startswith("\n\n--- UPLOADED DOCUMENTS ---\n")
        assert 'Document 1: "a.txt"\nContent:\nalpha\n---\n' in context
        assert 'Document 3: "c.txt"\nContent:\ngamma\n---\n' in context
        assert "empty.pdf" not in context

    def test_content_is_truncated(self):
        context = build_document_context([{"name": "big.txt", "content": "x" * (DOCUMENT_EXCERPT_LIMIT + 100)}])
        assert "x" * DOCUMENT_EXCERPT_LIMIT in context
        assert "x" * (DOCUMENT_EXCERPT_LIMIT + 1) not in context

    def test_has_document_content(self):
        assert has_document_content([{"name": "a", "content": "text"}])
        assert not has_document_content([{"name": "a", "content": "   "}, {"name": "b"}])
        assert not has_document_content([])


@pytest.mark.unit
class TestSystemPrompt:
    def test_no_documents_forces_fixed_reply(self):
        prompt = build_system_prompt("english", "", has_documents=False)
        assert "NO DOCUMENTS UPLOADED" in prompt
        assert f'"{NO_INFO_MESSAGE}"' in prompt
        assert "YOUR ONLY SOURCE OF TRUTH" not in prompt

    def test_documents_and_language(self):
        context = build_document_context([{"name": "policy.txt", "content": "Refunds within 30 days."}])
        prompt = build_system_prompt("hindi", context, has_documents=True)
        assert "Response language: HINDI" in prompt
        assert "Devanagari" in prompt
        assert "Refunds within 30 days." in prompt
        assert "NO DOCUMENTS UPLOADED" not in prompt
        assert prompt.rstrip().endswith(f'"{NO_INFO_MESSAGE}"')

    def test_live_data_section_only_when_present(self):
        without = build_system_prompt("english", "", has_documents=False)
        assert "--- LIVE DATA" not in without

        with_live = build_system_prompt("english", "", has_documents=False, live_context="GOLD 24K: 1")
        assert "--- LIVE DATA (fetched for this question) ---\nGOLD 24K: 1" in with_live

    def test_strict_prompt_never_mentions_live_data(self):
        prompt = build_system_prompt("english", "", has_documents=False)
        assert "LIVE DATA" not in prompt
        assert "politics, or any real-time data\n5. " in prompt

    def test_live_data_relaxes_real_time_rule(self):
        prompt = build_system_prompt("english", "", has_documents=False, live_context="GOLD 24K: 1")
        assert "or any real-time data unless it appears in a LIVE DATA section below\n" in prompt

    @pytest.mark.parametrize("has_documents", [True, False])
    def test_blank_line_before_documents_block(self, has_documents):
        prompt = build_system_prompt("english", "ctx", has_documents=has_documents)
        opening = "--- UPLOADED DOCUMENTS (YOUR ONLY SOURCE OF TRUTH) ---" if has_documents else "⚠️ NO DOCUMENTS UPLOADED"
        assert f"regardless of language preference\n\n\n{opening}\n" in prompt
