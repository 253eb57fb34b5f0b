"""
Tests for the in-memory pipeline board.
"""

from types import SimpleNamespace

import pytest

from ats.pipeline import STAGE_VALUES, BoardError, BoardSessionStore, PipelineBoard


def app(pk, stage):
    return SimpleNamespace(pk=pk, stage=stage)


@pytest.fixture
def board():
    return PipelineBoard.load(7, [app(1, 'new'), app(2, 'new'), app(3, 'interview'), app(4, 'archived')])


class TestPipelineBoard:

    def test_load_partitions_by_stage(self, board):
        assert list(board.columns) == STAGE_VALUES
        assert board.columns['new'] == [1, 2, 4]
        assert board.columns['interview'] == [3]
        assert board.counts()['hired'] == 0

    def test_unknown_stage_falls_back_to_first_column(self):
        assert PipelineBoard.column_for('archived') == 'new'
        assert PipelineBoard.column_for(None) == 'new'
        assert PipelineBoard.column_for('offer') == 'offer'

    def test_drop_in_place_is_noop(self, board):
        assert board.move(2, 'new', 1, 'new') is None
        assert board.columns['new'] == [1, 2, 4]

    def test_reorder_within_column(self, board):
        move = board.move(4, 'new', 0, 'new')

        assert not move.changes_stage
        assert board.columns['new'] == [4, 1, 2]

    def test_move_across_columns(self, board):
        move = board.move(1, 'new', 0, 'interview')

        assert move.changes_stage
        assert board.columns['new'] == [2, 4]
        assert board.columns['interview'] == [1, 3]

    def test_index_is_clamped(self, board):
        board.move(1, 'new', 99, 'interview')
        assert board.columns['interview'] == [3, 1]

    def test_rollback_restores_pre_move_state(self, board):
        before = board.snapshot()
        move = board.move(2, 'new', 1, 'interview')

        board.rollback(move)

        assert board.columns == before

    def test_card_not_in_source_column(self, board):
        with pytest.raises(BoardError):
            board.move(3, 'new', 0, 'offer')

    def test_unknown_stage_rejected(self, board):
        with pytest.raises(BoardError):
            board.move(1, 'new', 0, 'limbo')

    def test_reconcile_keeps_local_order_and_applies_db_stage(self, board):
        board.move(4, 'new', 0, 'new')

        board.reconcile([app(1, 'new'), app(2, 'offer'), app(4, 'new'), app(5, 'new')])

        assert board.columns['new'] == [4, 1, 5]
        assert board.columns['offer'] == [2]
        assert board.columns['interview'] == []

    def test_session_store_round_trip(self, board):
        session = {}
        store = BoardSessionStore(session)
        store.save(board)

        assert store.get(7).columns == board.columns
        assert store.get(8) is None
