from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from io import StringIO
from typing import Iterable, List

from ..core.classify import Prediction
from ..core.predict import Predictor
from ..errors import InsufficientData


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReplayRow:
    timestamp: int
    channel: str
    value: float


def parse_csv(text: str) -> List[ReplayRow]:
    """Parse ``timestamp,channel,value`` rows; headers and malformed rows are skipped."""
    rows: List[ReplayRow] = []
    reader = csv.reader(StringIO(text))
    for row in reader:
        if len(row) < 3:
            continue
        try:
            ts = int(float(row[0]))
            value = float(row[2])
        except ValueError:
            continue
        rows.append(ReplayRow(timestamp=ts, channel=row[1].strip(), value=value))
    return rows


@dataclass(frozen=True)
class ReplayResult:
    timestamp: int
    prediction: Prediction


class ReplayRunner:
    """Feed recorded rows into a Predictor, predicting every ``every`` rows.

    Rows for channels the predictor does not know are skipped. Steps where
    the window is still too short are logged and skipped; any other error
    ends the replay.
    """

    def __init__(self, predictor: Predictor, every: int = 1) -> None:
        if every <= 0:
            raise ValueError("every must be > 0")
        self.predictor = predictor
        self.every = every
        self.skipped_rows = 0

    async def run(self, rows: Iterable[ReplayRow]) -> List[ReplayResult]:
        known = set(self.predictor.channels)
        results: List[ReplayResult] = []
        fed = 0
        for row in rows:
            if row.channel not in known:
                self.skipped_rows += 1
                continue
            self.predictor.add_datapoint(row.channel, row.value, row.timestamp)
            fed += 1
            if fed % self.every:
                continue
            try:
                pred = await self.predictor.predict()
            except InsufficientData:
                logger.debug("replay step skipped", extra={"row": fed})
                continue
            results.append(ReplayResult(timestamp=row.timestamp, prediction=pred))
        if self.skipped_rows:
            logger.info("replay skipped rows for unknown channels", extra={"skipped": self.skipped_rows})
        return results
