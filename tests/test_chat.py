"""Tests for the conversation model."""

from planner.core.chat import ChatMessage, Conversation, Role


class TestConversation:
    def test_insertion_order_and_history(self):
        conversation = Conversation()
        conversation.add_user("add gym every day")
        conversation.add_assistant("Daily task created!")
        conversation.add_user("add gym every day")

        assert len(conversation) == 3
        assert conversation.history() == [
            {"role": "user", "content": "add gym every day"},
            {"role": "assistant", "content": "Daily task created!"},
            {"role": "user", "content": "add gym every day"},
        ]

    def test_messages_get_distinct_ids(self):
        conversation = Conversation()
        a = conversation.add_user("hi")
        b = conversation.add_user("hi")
        assert a.id != b.id

    def test_is_user(self):
        assert ChatMessage(id="1", text="x", role=Role.USER).is_user is True
        assert ChatMessage(id="2", text="x", role=Role.ASSISTANT).is_user is False

    def test_history_is_a_copy(self):
        conversation = Conversation()
        conversation.add_user("hi")
        history = conversation.history()
        conversation.add_assistant("hello")
        assert len(history) == 1
