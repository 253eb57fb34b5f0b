"""
Pipeline board - per-session kanban state for one job.

The board groups a job's applications by stage. Moves are applied locally
first; the caller then persists the stage change and, if that fails, rolls
the board back with the snapshot captured before the move. Only stage
membership is durable; order inside a column lives in the session.
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .models import Application

logger = logging.getLogger(__name__)

BOARD_STAGES = [
    Application.Stage.NEW,
    Application.Stage.PHONE_SCREEN,
    Application.Stage.INTERVIEW,
    Application.Stage.TECHNICAL,
    Application.Stage.OFFER,
    Application.Stage.HIRED,
    Application.Stage.REJECTED,
]
STAGE_VALUES = [str(stage) for stage in BOARD_STAGES]
FALLBACK_STAGE = STAGE_VALUES[0]


class BoardError(Exception):
    """A move that does not fit the board's current state."""


@dataclass(frozen=True)
class BoardMove:
    application_id: int
    from_stage: str
    to_stage: str
    to_index: int
    snapshot: Dict[str, List[int]]

    @property
    def changes_stage(self):
        return self.from_stage != self.to_stage


@dataclass
class PipelineBoard:
    """
    Stage -> ordered application ids for one job.

    `columns` always has every board stage as a key.
    """

    job_id: int
    columns: Dict[str, List[int]] = field(default_factory=lambda: {s: [] for s in STAGE_VALUES})

    @classmethod
    def load(cls, job_id: int, applications: Iterable[Application]) -> 'PipelineBoard':
        """Partition applications by stage; unknown stages land in the first column."""
        board = cls(job_id=job_id)
        for application in applications:
            board.columns[cls.column_for(application.stage)].append(application.pk)
        return board

    @staticmethod
    def column_for(stage: Optional[str]) -> str:
        return stage if stage in STAGE_VALUES else FALLBACK_STAGE

    def stage_of(self, application_id: int) -> Optional[str]:
        for stage, ids in self.columns.items():
            if application_id in ids:
                return stage
        return None

    def snapshot(self) -> Dict[str, List[int]]:
        return copy.deepcopy(self.columns)

    def move(self, application_id: int, from_stage: str, to_index: int, to_stage: str) -> Optional[BoardMove]:
        """
        Move a card. Returns None when the card is dropped where it already is.

        Raises:
            BoardError: Unknown stage or the card is not in `from_stage`.
        """
        if from_stage not in self.columns or to_stage not in self.columns:
            raise BoardError(f"Unknown stage: {from_stage!r} -> {to_stage!r}")

        source = self.columns[from_stage]
        if application_id not in source:
            raise BoardError(f"Application {application_id} is not in stage {from_stage!r}")

        from_index = source.index(application_id)
        if from_stage == to_stage and from_index == to_index:
            return None

        snapshot = self.snapshot()

        source.pop(from_index)
        destination = self.columns[to_stage]
        to_index = max(0, min(to_index, len(destination)))
        destination.insert(to_index, application_id)

        return BoardMove(
            application_id=application_id,
            from_stage=from_stage,
            to_stage=to_stage,
            to_index=to_index,
            snapshot=snapshot,
        )

    def rollback(self, move: BoardMove) -> None:
        """Restore the exact state captured before `move`."""
        self.columns = copy.deepcopy(move.snapshot)
        logger.info(f"Board for job {self.job_id} rolled back move of application {move.application_id}")

    def reconcile(self, applications: Iterable[Application]) -> None:
        """
        Bring stage membership in line with the database.

        Cards whose stage is unchanged keep their local order; cards that
        moved elsewhere or are new are appended to their column; deleted
        cards disappear.
        """
        stored = {app.pk: self.column_for(app.stage) for app in applications}
        columns = {stage: [] for stage in STAGE_VALUES}

        for stage, ids in self.columns.items():
            for app_id in ids:
                if stored.get(app_id) == stage:
                    columns[stage].append(app_id)

        placed = {app_id for ids in columns.values() for app_id in ids}
        for app_id, stage in stored.items():
            if app_id not in placed:
                columns[stage].append(app_id)

        self.columns = columns

    def counts(self) -> Dict[str, int]:
        return {stage: len(ids) for stage, ids in self.columns.items()}

    def to_session(self) -> dict:
        return {'job_id': self.job_id, 'columns': self.columns}

    @classmethod
    def from_session(cls, data: dict) -> 'PipelineBoard':
        columns = {s: [int(i) for i in data.get('columns', {}).get(s, [])] for s in STAGE_VALUES}
        return cls(job_id=data['job_id'], columns=columns)


class BoardSessionStore:
    """Keeps one board per job in the user's session."""

    session_key = 'pipeline_boards'

    def __init__(self, session):
        self.session = session

    def get(self, job_id: int) -> Optional[PipelineBoard]:
        data = self.session.get(self.session_key, {}).get(str(job_id))
        return PipelineBoard.from_session(data) if data else None

    def save(self, board: PipelineBoard) -> None:
        boards = dict(self.session.get(self.session_key, {}))
        boards[str(board.job_id)] = board.to_session()
        self.session[self.session_key] = boards
