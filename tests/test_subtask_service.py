"""Integration tests for SubtaskService."""

import pytest

from kanri.errors import OwnershipViolation, ScopeMismatch, ValidationError


@pytest.fixture
async def card(app, board, columns):
    return await app.card_service.create_card(board.id, columns[0].id, "Checklist")


class TestSubtasks:
    """Tests for subtask CRUD and ordering."""

    async def test_create_appends(self, app, board, card):
        """Subtasks append in creation order."""
        first = await app.subtask_service.create_subtask(board.id, card.id, "one")
        second = await app.subtask_service.create_subtask(board.id, card.id, "two")

        assert (first.position, second.position) == (0, 1)
        assert first.is_completed is False

    async def test_create_at_index(self, app, board, card):
        await app.subtask_service.create_subtask(board.id, card.id, "one")
        await app.subtask_service.create_subtask(board.id, card.id, "zero", position=0)

        listed = await app.subtask_service.list_subtasks(card.id)
        assert [(s.title, s.position) for s in listed] == [("zero", 0), ("one", 1)]

    async def test_title_limit(self, app, board, card):
        with pytest.raises(ValidationError):
            await app.subtask_service.create_subtask(board.id, card.id, "x" * 201)

    async def test_card_on_other_board(self, app, board, card):
        other = await app.board_service.create_board("Other")

        with pytest.raises(OwnershipViolation):
            await app.subtask_service.create_subtask(other.id, card.id, "one")

    async def test_complete_and_reposition(self, app, board, card):
        """update_subtask can toggle completion and move in one call."""
        first = await app.subtask_service.create_subtask(board.id, card.id, "one")
        await app.subtask_service.create_subtask(board.id, card.id, "two")

        updated = await app.subtask_service.update_subtask(
            first.id, board.id, card.id, is_completed=True, target_position=5
        )

        assert updated.is_completed is True
        assert updated.position == 1
        listed = await app.subtask_service.list_subtasks(card.id)
        assert [s.title for s in listed] == ["two", "one"]

    async def test_update_through_wrong_card(self, app, board, columns, card):
        subtask = await app.subtask_service.create_subtask(board.id, card.id, "one")
        other = await app.card_service.create_card(board.id, columns[1].id, "Other")

        with pytest.raises(OwnershipViolation):
            await app.subtask_service.update_subtask(subtask.id, board.id, other.id, title="x")

    async def test_delete_renumbers(self, app, board, card):
        first = await app.subtask_service.create_subtask(board.id, card.id, "one")
        await app.subtask_service.create_subtask(board.id, card.id, "two")

        await app.subtask_service.delete_subtask(first.id, board.id, card.id)

        listed = await app.subtask_service.list_subtasks(card.id)
        assert [(s.title, s.position) for s in listed] == [("two", 0)]

    async def test_move_to_card_on_other_board(self, app, board, card):
        """Subtasks cannot leave their board."""
        subtask = await app.subtask_service.create_subtask(board.id, card.id, "one")
        other = await app.board_service.create_board("Other")
        column = await app.column_service.create_column(other.id, "Todo")
        foreign = await app.card_service.create_card(other.id, column.id, "Foreign")

        with pytest.raises(ScopeMismatch):
            await app.subtask_service.move_subtask(board.id, subtask.id, card.id, foreign.id, 0)
